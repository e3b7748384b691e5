"""
URL configuration for the equiptrack project.
"""
from django.contrib import admin
from django.urls import path, include

from common.health import get_health_urls

admin.site.site_header = "Equipment Registry"
admin.site.site_title = "Equipment Registry"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('api.urls')),
]

# Health check endpoints (for load balancers, monitoring)
urlpatterns += get_health_urls()
