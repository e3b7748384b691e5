"""
Health check endpoints.

- /health/        liveness: the process answers
- /health/ready/  readiness: database reachable and the grant cache round-trips
"""

import time
import logging
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


@require_GET
def health_check(request):
    """Basic health check - returns 200 if app is running."""
    return JsonResponse({
        'status': 'healthy',
        'timestamp': time.time(),
    })


def _check_database():
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
        cursor.fetchone()


def _check_cache():
    cache_key = 'health_check_test'
    cache.set(cache_key, 'ok', 10)
    ok = cache.get(cache_key) == 'ok'
    cache.delete(cache_key)
    return ok


@require_GET
def readiness_check(request):
    """
    Readiness check - database and cache connectivity.
    Step-up grants live in the cache, so a broken cache means edits cannot
    be confirmed.
    """
    checks = {'database': False, 'cache': False}
    errors = []

    try:
        _check_database()
        checks['database'] = True
    except DatabaseError as e:
        errors.append(f'Database: {e}')
        logger.error(f'Health check - Database error: {e}')

    checks['cache'] = _check_cache()
    if not checks['cache']:
        errors.append('Cache: Failed to read/write')
        logger.error('Health check - Cache read/write failed')

    all_healthy = all(checks.values())
    return JsonResponse({
        'status': 'ready' if all_healthy else 'not_ready',
        'timestamp': time.time(),
        'checks': checks,
        'errors': errors or None,
    }, status=200 if all_healthy else 503)


def get_health_urls():
    """URL patterns for the health endpoints"""
    from django.urls import path

    return [
        path('health/', health_check, name='health_check'),
        path('health/ready/', readiness_check, name='readiness_check'),
    ]
