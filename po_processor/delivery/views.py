from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from po_processor.core.pagination import paginated_response
from po_processor.core.utils import create_audit_log
from po_processor.orders.models import PurchaseOrder
from po_processor.purchasing.models import SupplierOrder

from . import services
from .filters import DeliveryDocumentFilter
from .models import DeliveryDocument
from .serializers import CreateDeliveryFromPurchaseOrderSerializer, DeliveryDocumentSerializer


def _document_queryset():
    return DeliveryDocument.objects.select_related('purchase_order', 'supplier_order').prefetch_related('items')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def delivery_document_list_create(request):
    """List delivery documents or create a new one"""
    if request.method == 'GET':
        queryset = DeliveryDocumentFilter(request.query_params, queryset=_document_queryset()).qs
        queryset = queryset.order_by('-document_date', '-id')
        return paginated_response(request, queryset, DeliveryDocumentSerializer)
    else:  # POST
        serializer = DeliveryDocumentSerializer(data=request.data)
        if serializer.is_valid():
            document = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='DeliveryDocument',
                object_id=document.id,
                object_name=document.customer_name,
                object_reference=document.document_number,
                changes={'document_type': document.document_type, 'total_amount': str(document.total_amount)}
            )
            return Response(DeliveryDocumentSerializer(document).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def delivery_document_detail(request, pk):
    """Retrieve, update or delete a delivery document"""
    document = get_object_or_404(_document_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(DeliveryDocumentSerializer(document).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = DeliveryDocumentSerializer(document, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            document = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='DeliveryDocument',
                object_id=document.id,
                object_name=document.customer_name,
                object_reference=document.document_number,
                changes={'fields': sorted(request.data.keys())}
            )
            return Response(DeliveryDocumentSerializer(_document_queryset().get(pk=document.pk)).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        document_id = document.id
        document_number = document.document_number
        customer_name = document.customer_name
        document.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='DeliveryDocument',
            object_id=document_id,
            object_name=customer_name,
            object_reference=document_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def delivery_document_from_purchase_order(request):
    """Issue a delivery document for a customer purchase order"""
    serializer = CreateDeliveryFromPurchaseOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    purchase_order = get_object_or_404(PurchaseOrder.objects.prefetch_related('items'), pk=data['purchase_order'])
    supplier_order = None
    if data.get('supplier_order'):
        supplier_order = get_object_or_404(SupplierOrder, pk=data['supplier_order'])

    document = services.create_from_purchase_order(
        purchase_order,
        document_type=data['document_type'],
        vat_percent=data.get('vat_percent'),
        supplier_order=supplier_order,
        customer_trn=data.get('customer_trn', ''),
        user=request.user,
    )
    create_audit_log(
        request=request,
        action='convert',
        model_name='PurchaseOrder',
        object_id=purchase_order.id,
        object_name=purchase_order.customer_name,
        object_reference=purchase_order.po_number,
        changes={'delivery_document': document.document_number, 'document_type': document.document_type}
    )
    return Response(
        DeliveryDocumentSerializer(_document_queryset().get(pk=document.pk)).data,
        status=status.HTTP_201_CREATED
    )


def _advance_status(request, pk, advance):
    document = get_object_or_404(DeliveryDocument, pk=pk)
    old_status = advance(document)
    create_audit_log(
        request=request,
        action='status_change',
        model_name='DeliveryDocument',
        object_id=document.id,
        object_name=document.customer_name,
        object_reference=document.document_number,
        changes={'old_status': old_status, 'new_status': document.status}
    )
    return Response(DeliveryDocumentSerializer(_document_queryset().get(pk=document.pk)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def delivery_document_generate(request, pk):
    """Mark a draft delivery document as generated"""
    return _advance_status(request, pk, services.mark_generated)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def delivery_document_send(request, pk):
    """Mark a generated delivery document as sent"""
    return _advance_status(request, pk, services.mark_sent)
