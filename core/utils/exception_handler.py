import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.utils.errors import ServiceError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Global DRF exception handler.

    - ServiceError subclasses become `{'message': ...}` with their own status.
    - DRF exceptions keep their status; 'detail' is renamed to 'message' and
      field errors are nested under 'errors'.
    - Anything else is logged and answered with a generic 500.
    """
    if isinstance(exc, ServiceError):
        if exc.status_code >= 500:
            logger.error('Service failure in %s: %s', _view_name(context), exc.message)
        return Response({'message': exc.message}, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        logger.exception('Unhandled error in %s', _view_name(context), exc_info=exc)
        return Response({'message': 'Internal server error.'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    data = response.data
    if isinstance(data, dict) and 'detail' in data:
        response.data = {'message': str(data['detail'])}
    elif isinstance(data, list) and data:
        response.data = {'message': str(data[0])}
    else:
        response.data = {'message': 'Invalid input.', 'errors': data}
    return response


def _view_name(context) -> str:
    view = (context or {}).get('view')
    return type(view).__name__ if view is not None else 'unknown view'
