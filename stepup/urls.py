from django.urls import path
from .views import StepUpView

urlpatterns = [
    path('', StepUpView.as_view(), name='step-up'),
]
