from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .services import dashboard_stats as get_dashboard_stats


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats(request):
    """Dashboard statistics: order totals, expiring orders and pipeline counts"""
    return Response(get_dashboard_stats())
