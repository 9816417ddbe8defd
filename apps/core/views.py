"""
Core views for the Property Calculators service.
"""

from django.http import JsonResponse


def health_check(request):
    """
    GET /health/

    Simple health check endpoint for Docker and load balancer probes.
    """
    return JsonResponse({'status': 'healthy'}, status=200)
