from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from po_processor.core.pagination import paginated_response
from po_processor.core.utils import create_audit_log
from po_processor.quotations.models import Quotation
from po_processor.quotations.serializers import QuotationSerializer

from . import services
from .filters import CustomerInquiryFilter
from .models import CustomerInquiry
from .serializers import CreateQuotationSerializer, CustomerInquirySerializer


def _inquiry_queryset():
    return CustomerInquiry.objects.select_related('purchase_order').prefetch_related('items', 'quotations')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def inquiry_list_create(request):
    """List customer inquiries or record a new inquiry"""
    if request.method == 'GET':
        queryset = CustomerInquiryFilter(request.query_params, queryset=_inquiry_queryset()).qs
        queryset = queryset.order_by('-inquiry_date', '-id')
        return paginated_response(request, queryset, CustomerInquirySerializer)
    else:  # POST
        serializer = CustomerInquirySerializer(data=request.data)
        if serializer.is_valid():
            inquiry = serializer.save(created_by=request.user)
            create_audit_log(
                request=request,
                action='create',
                model_name='CustomerInquiry',
                object_id=inquiry.id,
                object_name=inquiry.customer_name,
                object_reference=inquiry.inquiry_number,
                changes={'items_count': inquiry.items.count()}
            )
            return Response(CustomerInquirySerializer(inquiry).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def inquiry_detail(request, pk):
    """Retrieve, update or delete a customer inquiry"""
    inquiry = get_object_or_404(_inquiry_queryset(), pk=pk)

    if request.method == 'GET':
        return Response(CustomerInquirySerializer(inquiry).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CustomerInquirySerializer(inquiry, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            inquiry = serializer.save()
            create_audit_log(
                request=request,
                action='update',
                model_name='CustomerInquiry',
                object_id=inquiry.id,
                object_name=inquiry.customer_name,
                object_reference=inquiry.inquiry_number,
                changes={'fields': sorted(request.data.keys())}
            )
            return Response(CustomerInquirySerializer(_inquiry_queryset().get(pk=inquiry.pk)).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        inquiry_id = inquiry.id
        inquiry_number = inquiry.inquiry_number
        customer_name = inquiry.customer_name
        inquiry.delete()
        create_audit_log(
            request=request,
            action='delete',
            model_name='CustomerInquiry',
            object_id=inquiry_id,
            object_name=customer_name,
            object_reference=inquiry_number,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inquiry_mark_reviewed(request, pk):
    """Mark an inquiry as reviewed"""
    inquiry = get_object_or_404(CustomerInquiry, pk=pk)
    old_status = inquiry.status
    services.mark_reviewed(inquiry)
    create_audit_log(
        request=request,
        action='status_change',
        model_name='CustomerInquiry',
        object_id=inquiry.id,
        object_name=inquiry.customer_name,
        object_reference=inquiry.inquiry_number,
        changes={'old_status': old_status, 'new_status': inquiry.status}
    )
    return Response(CustomerInquirySerializer(_inquiry_queryset().get(pk=inquiry.pk)).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def inquiry_create_quotation(request, pk):
    """Generate a quotation from an inquiry's items"""
    inquiry = get_object_or_404(CustomerInquiry.objects.prefetch_related('items'), pk=pk)
    serializer = CreateQuotationSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    quotation = services.create_quotation(inquiry, user=request.user, **serializer.validated_data)
    create_audit_log(
        request=request,
        action='convert',
        model_name='CustomerInquiry',
        object_id=inquiry.id,
        object_name=inquiry.customer_name,
        object_reference=inquiry.inquiry_number,
        changes={
            'quotation': quotation.quotation_number,
            'total_amount': str(quotation.total_amount),
            'inquiry_status': inquiry.status,
        }
    )
    quotation = Quotation.objects.prefetch_related('items').get(pk=quotation.pk)
    return Response(QuotationSerializer(quotation).data, status=status.HTTP_201_CREATED)
