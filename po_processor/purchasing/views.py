from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from po_processor.core.pagination import paginated_response
from po_processor.core.utils import create_audit_log
from po_processor.orders.models import PurchaseOrder

from . import services
from .filters import SupplierOrderFilter
from .models import SupplierOrder
from .serializers import (
    CreateFromPurchaseOrderSerializer, SupplierOrderSerializer, SupplierOrderStatusSerializer,
)


def _supplier_order_queryset():
    return SupplierOrder.objects.select_related('purchase_order').prefetch_related('items', 'delivery_documents')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_order_list_create(request):
    """List supplier orders or create a new supplier order"""
    if request.method == 'GET':
        queryset = SupplierOrderFilter(request.query_params, queryset=_supplier_order_queryset()).qs
        queryset = queryset.order_by('-order_date', '-id')
        return paginated_response(request, queryset, SupplierOrderSerializer)
    else:  # POST
        serializer = SupplierOrderSerializer(data=request.data)
        if serializer.is_valid():
            order = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='SupplierOrder',
                object_id=order.id,
                object_name=order.supplier_name,
                object_reference=order.order_number,
                changes={'total_amount': str(order.total_amount)}
            )
            return Response(SupplierOrderSerializer(order).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_order_detail(request, pk):
    """Retrieve, update or delete a supplier order"""
    order = get_object_or_404(_supplier_order_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(SupplierOrderSerializer(order).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierOrderSerializer(order, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            order = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='SupplierOrder',
                object_id=order.id,
                object_name=order.supplier_name,
                object_reference=order.order_number,
                changes={'fields': sorted(request.data.keys())}
            )
            return Response(SupplierOrderSerializer(_supplier_order_queryset().get(pk=order.pk)).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        order_id = order.id
        order_number = order.order_number
        supplier_name = order.supplier_name
        order.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='SupplierOrder',
            object_id=order_id,
            object_name=supplier_name,
            object_reference=order_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def supplier_order_status(request, pk):
    """Move a supplier order to a new status"""
    order = get_object_or_404(SupplierOrder, pk=pk)
    serializer = SupplierOrderStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = services.transition(order, serializer.validated_data['status'])
    create_audit_log(
        request=request,
        action='status_change',
        model_name='SupplierOrder',
        object_id=order.id,
        object_name=order.supplier_name,
        object_reference=order.order_number,
        changes={'old_status': old_status, 'new_status': order.status}
    )
    return Response(SupplierOrderSerializer(_supplier_order_queryset().get(pk=order.pk)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def supplier_order_from_purchase_order(request):
    """Raise a supplier order from a customer purchase order's line items"""
    serializer = CreateFromPurchaseOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    purchase_order = get_object_or_404(PurchaseOrder.objects.prefetch_related('items'), pk=data['purchase_order'])
    order = services.create_from_purchase_order(
        purchase_order,
        data['supplier'],
        item_codes=data.get('item_codes'),
        expected_delivery_date=data.get('expected_delivery_date'),
        notes=data.get('notes', ''),
        user=request.user,
    )
    create_audit_log(
        request=request,
        action='convert',
        model_name='PurchaseOrder',
        object_id=purchase_order.id,
        object_name=purchase_order.customer_name,
        object_reference=purchase_order.po_number,
        changes={'supplier_order': order.order_number, 'supplier': order.supplier_name}
    )
    return Response(
        SupplierOrderSerializer(_supplier_order_queryset().get(pk=order.pk)).data,
        status=status.HTTP_201_CREATED
    )
