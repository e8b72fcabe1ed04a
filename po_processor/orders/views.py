from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from po_processor.core.pagination import paginated_response
from po_processor.core.utils import create_audit_log

from .filters import PurchaseOrderFilter
from .models import PurchaseOrder
from .serializers import PurchaseOrderSerializer
from .services import expired_orders, expiring_orders


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List purchase orders or create a new purchase order"""
    if request.method == 'GET':
        queryset = PurchaseOrder.objects.all().prefetch_related('items')
        queryset = PurchaseOrderFilter(request.query_params, queryset=queryset).qs
        queryset = queryset.order_by('-po_date', '-id')
        return paginated_response(request, queryset, PurchaseOrderSerializer)
    else:  # POST
        serializer = PurchaseOrderSerializer(data=request.data)
        if serializer.is_valid():
            purchase_order = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='PurchaseOrder',
                object_id=purchase_order.id,
                object_name=purchase_order.customer_name,
                object_reference=purchase_order.po_number,
                changes={
                    'total_amount': str(purchase_order.total_amount),
                    'expiry_date': purchase_order.expiry_date.isoformat(),
                    'items_count': purchase_order.items.count(),
                }
            )
            return Response(PurchaseOrderSerializer(purchase_order).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    """Retrieve, update or delete a purchase order"""
    purchase_order = get_object_or_404(PurchaseOrder.objects.prefetch_related('items'), pk=pk)

    if request.method == 'GET':
        serializer = PurchaseOrderSerializer(purchase_order)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = PurchaseOrderSerializer(
            purchase_order,
            data=request.data,
            partial=request.method == 'PATCH'
        )
        if serializer.is_valid():
            purchase_order = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='PurchaseOrder',
                object_id=purchase_order.id,
                object_name=purchase_order.customer_name,
                object_reference=purchase_order.po_number,
                changes={'fields': sorted(request.data.keys())}
            )
            return Response(PurchaseOrderSerializer(purchase_order).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        po_id = purchase_order.id
        po_number = purchase_order.po_number
        customer_name = purchase_order.customer_name
        purchase_order.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='PurchaseOrder',
            object_id=po_id,
            object_name=customer_name,
            object_reference=po_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_expiring(request):
    """Purchase orders expiring within the alert window"""
    serializer = PurchaseOrderSerializer(expiring_orders(), many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def purchase_order_expired(request):
    """Purchase orders past their expiry date"""
    serializer = PurchaseOrderSerializer(expired_orders(), many=True)
    return Response(serializer.data)
