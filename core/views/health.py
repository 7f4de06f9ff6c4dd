import logging

from django.db import DatabaseError, connections
from django.utils import timezone
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        db_ok = bool(row and row[0] == 1)
    except DatabaseError:
        logger.exception("Health check could not reach the database")
        db_ok = False
    body = {
        'success': db_ok,
        'message': 'Server is running' if db_ok else 'Database unavailable',
        'data': {'database': 'up' if db_ok else 'down', 'timestamp': timezone.now().isoformat()},
    }
    return Response(body, status=200 if db_ok else 503)
