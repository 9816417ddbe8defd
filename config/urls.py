"""
URL configuration for the Property Calculators service.
"""

from django.urls import include, path

from apps.core.views import health_check

urlpatterns = [
    path('health/', health_check, name='health-check'),
    path('api/', include('apps.calculators.urls')),
]
