"""
API key authorization middleware.

Every endpoint except /health/ and /admin/ requires a valid key, sent
either in the X-API-KEY header or as an "Authorization: Bearer <key>"
header.
"""

import hmac
import logging

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)

# Paths that don't require authorization
EXEMPT_PATHS = (
    '/health',
    '/admin/',
)


def _error(status_code, detail):
    return JsonResponse(
        {'error': True, 'status_code': status_code, 'detail': detail},
        status=status_code,
    )


def extract_api_key(request) -> str:
    """Return the key from X-API-KEY, falling back to a Bearer token."""
    key = request.META.get('HTTP_X_API_KEY', '').strip()
    if key:
        return key

    authorization = request.META.get('HTTP_AUTHORIZATION', '')
    scheme, _, token = authorization.partition(' ')
    if scheme.lower() == 'bearer':
        return token.strip()
    return ''


class APIKeyMiddleware:
    """
    Rejects requests that do not carry one of settings.API_KEYS.

    If API_KEYS is empty (local development), the middleware lets
    every request through.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path.startswith(EXEMPT_PATHS):
            return self.get_response(request)

        api_keys = getattr(settings, 'API_KEYS', [])
        if not api_keys:
            return self.get_response(request)

        provided_key = extract_api_key(request)

        if not provided_key:
            logger.warning("Request to %s rejected: missing API key", request.path)
            return _error(
                401,
                'Authentication required. Provide X-API-KEY or Authorization: Bearer header.',
            )

        provided = provided_key.encode()
        if not any(hmac.compare_digest(provided, key.encode()) for key in api_keys):
            logger.warning("Request to %s rejected: invalid API key", request.path)
            return _error(403, 'Invalid API key.')

        return self.get_response(request)
