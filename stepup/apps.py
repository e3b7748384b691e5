from django.apps import AppConfig


class StepUpConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'stepup'
    verbose_name = 'Step-up Authentication'
