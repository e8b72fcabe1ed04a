from django.db import transaction
from rest_framework import serializers

from po_processor.core.display import status_display
from po_processor.core.utils import replace_items

from .models import CustomerInquiry, InquiryItem
from .services import next_inquiry_number, refresh_status


class InquiryItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = InquiryItem
        fields = [
            'id', 'item_name', 'item_code', 'description', 'quantity', 'unit',
            'manufacturer_part', 'class_code', 'plant', 'status',
        ]
        read_only_fields = ['id']


class CustomerInquirySerializer(serializers.ModelSerializer):
    items = InquiryItemSerializer(many=True, required=False)
    inquiry_number = serializers.CharField(required=False, allow_blank=True, max_length=100)
    status_display = serializers.SerializerMethodField()
    quotation = serializers.SerializerMethodField()
    quotation_number = serializers.SerializerMethodField()
    po_number = serializers.SerializerMethodField()
    quoted_count = serializers.SerializerMethodField()
    pending_count = serializers.SerializerMethodField()

    class Meta:
        model = CustomerInquiry
        fields = [
            'id', 'inquiry_number', 'inquiry_date',
            'customer_name', 'customer_address', 'customer_email', 'customer_phone',
            'sender_email', 'notes', 'pdf_path', 'status', 'status_display',
            'quotation', 'quotation_number', 'purchase_order', 'po_number',
            'quoted_count', 'pending_count', 'items',
            'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['status', 'purchase_order', 'created_by', 'created_at', 'updated_at']

    def get_status_display(self, obj):
        return status_display('inquiry', obj.status)

    def get_quotation(self, obj):
        quotation = obj.quotation
        return quotation.id if quotation else None

    def get_quotation_number(self, obj):
        quotation = obj.quotation
        return quotation.quotation_number if quotation else None

    def get_po_number(self, obj):
        return obj.purchase_order.po_number if obj.purchase_order_id else None

    def get_quoted_count(self, obj):
        return obj.item_counts()[0]

    def get_pending_count(self, obj):
        return obj.item_counts()[1]

    def validate_inquiry_number(self, value):
        value = value.strip()
        if value and CustomerInquiry.objects.filter(inquiry_number=value).exclude(
            pk=getattr(self.instance, 'pk', None)
        ).exists():
            raise serializers.ValidationError('An inquiry with this number already exists.')
        return value

    def create(self, validated_data):
        items_data = validated_data.pop('items', [])
        with transaction.atomic():
            if not validated_data.get('inquiry_number'):
                validated_data['inquiry_number'] = next_inquiry_number(validated_data.get('inquiry_date'))
            inquiry = CustomerInquiry.objects.create(**validated_data)
            replace_items(inquiry, items_data, InquiryItem, 'inquiry', with_totals=False)
            refresh_status(inquiry)
        return inquiry

    def update(self, instance, validated_data):
        items_data = validated_data.pop('items', None)
        if not validated_data.get('inquiry_number', True):
            validated_data.pop('inquiry_number')
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if items_data is not None:
                replace_items(instance, items_data, InquiryItem, 'inquiry', with_totals=False)
                refresh_status(instance)
        return instance


class CreateQuotationSerializer(serializers.Serializer):
    prices = serializers.DictField(
        child=serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0),
        required=False,
        default=dict
    )
    validity_date = serializers.DateField(required=False)
    currency = serializers.CharField(required=False, max_length=10)
    terms = serializers.CharField(required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    vat_percent = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, required=False)
    use_catalog = serializers.BooleanField(default=True)
