"""
Error handling middleware for the JSON API
"""

import logging
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class ErrorHandlingMiddleware(MiddlewareMixin):
    """
    Renders unhandled exceptions under /api/ in the error envelope.

    Domain errors raised inside DRF views never reach here; this catches
    whatever escapes the view layer, such as database failures.
    """

    def process_exception(self, request, exception):
        logger.error(f"Unhandled exception in {request.method} {request.path}: {exception}", exc_info=True)

        if not request.path.startswith('/api/'):
            return None

        return JsonResponse(
            {
                'code': 500,
                'msg': 'Internal server error, please try again later',
                'errors': {'detail': 'Internal server error'},
            },
            status=500,
        )
