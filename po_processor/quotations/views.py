from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from po_processor.core.pagination import paginated_response
from po_processor.core.utils import create_audit_log
from po_processor.orders.serializers import PurchaseOrderSerializer

from . import services
from .filters import QuotationFilter
from .models import Quotation
from .serializers import AcceptQuotationSerializer, PricePendingItemsSerializer, QuotationSerializer


def _quotation_queryset():
    return Quotation.objects.select_related('inquiry', 'purchase_order').prefetch_related('items')


def _audit_status_change(request, quotation, old_status, **extra):
    create_audit_log(
        request=request,
        action='status_change',
        model_name='Quotation',
        object_id=quotation.id,
        object_name=quotation.customer_name,
        object_reference=quotation.quotation_number,
        changes={'old_status': old_status, 'new_status': quotation.status, **extra}
    )


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def quotation_list_create(request):
    """List quotations or create a new quotation"""
    if request.method == 'GET':
        queryset = QuotationFilter(request.query_params, queryset=_quotation_queryset()).qs
        queryset = queryset.order_by('-quotation_date', '-id')
        return paginated_response(request, queryset, QuotationSerializer)
    else:  # POST
        serializer = QuotationSerializer(data=request.data)
        if serializer.is_valid():
            quotation = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='Quotation',
                object_id=quotation.id,
                object_name=quotation.customer_name,
                object_reference=quotation.quotation_number,
                changes={'total_amount': str(quotation.total_amount), 'status': quotation.status}
            )
            return Response(QuotationSerializer(quotation).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def quotation_detail(request, pk):
    """Retrieve, update or delete a quotation"""
    quotation = get_object_or_404(_quotation_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(QuotationSerializer(quotation).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = QuotationSerializer(quotation, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            quotation = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='Quotation',
                object_id=quotation.id,
                object_name=quotation.customer_name,
                object_reference=quotation.quotation_number,
                changes={'fields': sorted(request.data.keys())}
            )
            return Response(QuotationSerializer(_quotation_queryset().get(pk=quotation.pk)).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        quotation_id = quotation.id
        quotation_number = quotation.quotation_number
        customer_name = quotation.customer_name
        quotation.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='Quotation',
            object_id=quotation_id,
            object_name=customer_name,
            object_reference=quotation_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def quotation_price_items(request, pk):
    """Price the pending items of a quotation"""
    quotation = get_object_or_404(_quotation_queryset(), pk=pk)
    serializer = PricePendingItemsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    priced_items = services.price_pending_items(quotation, serializer.validated_data['prices'])
    create_audit_log(
        request=request,
        action='price_update',
        model_name='Quotation',
        object_id=quotation.id,
        object_name=quotation.customer_name,
        object_reference=quotation.quotation_number,
        changes={
            'priced_items': {item.item_name: str(item.unit_price) for item in priced_items},
            'total_amount': str(quotation.total_amount),
        }
    )
    quotation = _quotation_queryset().get(pk=quotation.pk)
    return Response({
        'priced_count': len(priced_items),
        'quotation': QuotationSerializer(quotation).data,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def quotation_send(request, pk):
    """Mark a quotation as sent to the customer"""
    quotation = get_object_or_404(Quotation, pk=pk)
    old_status = services.send(quotation)
    _audit_status_change(request, quotation, old_status)
    return Response(QuotationSerializer(_quotation_queryset().get(pk=quotation.pk)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def quotation_accept(request, pk):
    """Accept a quotation, optionally converting it into a customer purchase order"""
    quotation = get_object_or_404(_quotation_queryset(), pk=pk)
    serializer = AcceptQuotationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    old_status = quotation.status
    purchase_order = services.accept(
        quotation,
        po_number=data['po_number'].strip() if data.get('create_purchase_order') else None,
        po_date=data.get('po_date'),
        expiry_date=data.get('expiry_date'),
        user=request.user,
    )
    _audit_status_change(request, quotation, old_status)
    response = {'quotation': QuotationSerializer(_quotation_queryset().get(pk=quotation.pk)).data}
    if purchase_order is not None:
        create_audit_log(
            request=request,
            action='convert',
            model_name='Quotation',
            object_id=quotation.id,
            object_name=quotation.customer_name,
            object_reference=quotation.quotation_number,
            changes={'purchase_order': purchase_order.po_number}
        )
        response['purchase_order'] = PurchaseOrderSerializer(purchase_order).data
    return Response(response)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def quotation_reject(request, pk):
    """Mark a quotation as rejected"""
    quotation = get_object_or_404(Quotation, pk=pk)
    old_status = services.reject(quotation)
    _audit_status_change(request, quotation, old_status)
    return Response(QuotationSerializer(_quotation_queryset().get(pk=quotation.pk)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def quotation_expire_overdue(request):
    """Expire open quotations past their validity date"""
    return Response({'expired': services.expire_overdue()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def quotation_history(request):
    """Previous quotations for a material code, used for price look-up"""
    material_code = request.query_params.get('material_code', '').strip()
    if not material_code:
        return Response({'error': 'material_code parameter is required'}, status=status.HTTP_400_BAD_REQUEST)
    customer = request.query_params.get('customer', None)
    queryset = services.price_history(material_code, customer)
    return Response(QuotationSerializer(queryset, many=True).data)
