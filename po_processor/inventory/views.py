from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from po_processor.core.utils import create_audit_log

from .health import analyze
from .models import InventoryMaterial
from .serializers import InventoryMaterialSerializer, StockUpdateSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def material_list_create(request):
    """List inventory materials or add a new material"""
    if request.method == 'GET':
        queryset = InventoryMaterial.objects.all()
        search = request.query_params.get('search', '').strip()
        if search:
            queryset = queryset.filter(
                Q(material_name__icontains=search) |
                Q(material_code__icontains=search)
            )
        serializer = InventoryMaterialSerializer(queryset.order_by('material_code'), many=True)
        return Response(serializer.data)
    else:  # POST
        serializer = InventoryMaterialSerializer(data=request.data)
        if serializer.is_valid():
            material = serializer.save()
            create_audit_log(
                request=request,
                action='create',
                model_name='InventoryMaterial',
                object_id=material.id,
                object_name=material.material_name,
                object_reference=material.material_code,
            )
            return Response(InventoryMaterialSerializer(material).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def material_detail(request, pk):
    """Retrieve, update or delete an inventory material"""
    material = get_object_or_404(InventoryMaterial, pk=pk)

    if request.method == 'GET':
        return Response(InventoryMaterialSerializer(material).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InventoryMaterialSerializer(material, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        material.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def material_update_stock(request, pk):
    """Record the counted current stock of a material"""
    material = get_object_or_404(InventoryMaterial, pk=pk)
    serializer = StockUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_stock = material.current_stock
    material.current_stock = serializer.validated_data['current_stock']
    material.save(update_fields=['current_stock', 'updated_at'])
    create_audit_log(
        request=request,
        action='stock_update',
        model_name='InventoryMaterial',
        object_id=material.id,
        object_name=material.material_name,
        object_reference=material.material_code,
        changes={'old_stock': str(old_stock), 'new_stock': str(material.current_stock)}
    )
    return Response(InventoryMaterialSerializer(material).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def material_analysis(request, pk):
    """Health score, recommendations and demand trend, optionally for a what-if stock level"""
    material = get_object_or_404(InventoryMaterial, pk=pk)
    override = request.query_params.get('current_stock', None)
    current_stock = None
    if override not in (None, ''):
        serializer = StockUpdateSerializer(data={'current_stock': override})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        current_stock = serializer.validated_data['current_stock']
    return Response(analyze(material, current_stock))
