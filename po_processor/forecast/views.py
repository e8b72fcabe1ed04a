from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from po_processor.orders.services import material_codes

from .serializers import MaterialForecastSerializer
from .services import analyze_material


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def forecast_material_codes(request):
    """Unique material codes found on purchase order line items"""
    search = request.query_params.get('search', '').strip().lower()
    codes = material_codes()
    if search:
        codes = [code for code in codes if search in code.lower()]
    return Response({'material_codes': codes, 'count': len(codes)})


def _forecast_response(code):
    code = (code or '').strip()
    if not code:
        return Response({'error': 'material_code is required'}, status=status.HTTP_400_BAD_REQUEST)

    forecast = analyze_material(code, timezone.localdate())
    if forecast is None:
        return Response(
            {'error': f'No purchase history found for material code {code}'},
            status=status.HTTP_404_NOT_FOUND
        )
    return Response(MaterialForecastSerializer(forecast).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def forecast_material(request, code):
    """Stock / do-not-stock forecast for one material code"""
    return _forecast_response(code)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def forecast_search(request):
    """Forecast for the material code given as ?material_code= (or ?code=)"""
    code = request.query_params.get('material_code') or request.query_params.get('code')
    return _forecast_response(code)
