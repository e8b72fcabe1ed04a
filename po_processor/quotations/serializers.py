from django.db import transaction
from rest_framework import serializers

from po_processor.core.currency import format_amount, get_currency_symbol
from po_processor.core.display import status_display
from po_processor.core.numbering import next_quotation_number

from .models import Quotation, QuotationItem
from .pricing import calculate_totals
from .services import default_validity_date, default_vat_percent, mirror_to_inquiry, save_items, update_totals


class QuotationItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = QuotationItem
        fields = [
            'id', 'item_name', 'item_code', 'description', 'quantity', 'unit',
            'unit_price', 'total', 'manufacturer_part', 'is_priced', 'status',
        ]
        read_only_fields = ['id', 'is_priced', 'status']


class QuotationSerializer(serializers.ModelSerializer):
    items = QuotationItemSerializer(many=True, required=False)
    quotation_number = serializers.CharField(required=False, allow_blank=True)
    validity_date = serializers.DateField(required=False)
    vat_percent = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, required=False)
    inquiry_number = serializers.SerializerMethodField()
    po_number = serializers.SerializerMethodField()
    display_status = serializers.SerializerMethodField()
    status_display = serializers.SerializerMethodField()
    is_expired = serializers.SerializerMethodField()
    is_expiring_soon = serializers.SerializerMethodField()
    days_until_validity = serializers.SerializerMethodField()
    totals = serializers.SerializerMethodField()
    currency_symbol = serializers.SerializerMethodField()
    formatted_total = serializers.SerializerMethodField()

    class Meta:
        model = Quotation
        fields = [
            'id', 'quotation_number', 'quotation_date', 'validity_date',
            'customer_name', 'customer_address', 'customer_email', 'customer_phone',
            'total_amount', 'formatted_total', 'currency', 'currency_symbol', 'vat_percent', 'totals',
            'terms', 'notes', 'pdf_path', 'status', 'display_status', 'status_display',
            'is_expired', 'is_expiring_soon', 'days_until_validity',
            'inquiry', 'inquiry_number', 'purchase_order', 'po_number',
            'items', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['total_amount', 'status', 'purchase_order', 'created_by', 'created_at', 'updated_at']

    def get_inquiry_number(self, obj):
        return obj.inquiry.inquiry_number if obj.inquiry_id else None

    def get_po_number(self, obj):
        return obj.purchase_order.po_number if obj.purchase_order_id else None

    def get_display_status(self, obj):
        return obj.display_status

    def get_status_display(self, obj):
        return status_display('quotation', obj.display_status)

    def get_is_expired(self, obj):
        return obj.is_expired()

    def get_is_expiring_soon(self, obj):
        return obj.is_expiring_soon()

    def get_days_until_validity(self, obj):
        return obj.days_until_validity()

    def get_totals(self, obj):
        totals = calculate_totals(obj.items.all(), obj.vat_percent)
        return {key: float(value) for key, value in totals.items()}

    def get_currency_symbol(self, obj):
        return get_currency_symbol(obj.currency)

    def get_formatted_total(self, obj):
        return format_amount(obj.total_amount, obj.currency)

    def validate_quotation_number(self, value):
        value = value.strip()
        if value and Quotation.objects.filter(quotation_number=value).exclude(
            pk=getattr(self.instance, 'pk', None)
        ).exists():
            raise serializers.ValidationError('A quotation with this number already exists.')
        return value

    def create(self, validated_data):
        items_data = validated_data.pop('items', [])
        with transaction.atomic():
            if not validated_data.get('quotation_number'):
                validated_data['quotation_number'] = next_quotation_number(validated_data.get('quotation_date'))
            if not validated_data.get('validity_date'):
                validated_data['validity_date'] = default_validity_date(validated_data.get('quotation_date'))
            if validated_data.get('vat_percent') is None:
                validated_data['vat_percent'] = default_vat_percent()
            quotation = Quotation.objects.create(**validated_data)
            items = save_items(quotation, items_data)
            mirror_to_inquiry(quotation, [item for item in items if item.is_priced])
            update_totals(quotation)
        return quotation

    def update(self, instance, validated_data):
        items_data = validated_data.pop('items', None)
        if not validated_data.get('quotation_number', True):
            validated_data.pop('quotation_number')
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if items_data is not None:
                items = save_items(instance, items_data)
                mirror_to_inquiry(instance, [item for item in items if item.is_priced])
            update_totals(instance, status_from_items=items_data is not None)
        return instance


class PricePendingItemsSerializer(serializers.Serializer):
    prices = serializers.DictField(
        child=serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0),
        allow_empty=False
    )


class AcceptQuotationSerializer(serializers.Serializer):
    create_purchase_order = serializers.BooleanField(default=False)
    po_number = serializers.CharField(required=False, allow_blank=True, max_length=100)
    po_date = serializers.DateField(required=False)
    expiry_date = serializers.DateField(required=False)

    def validate(self, attrs):
        if attrs.get('create_purchase_order') and not attrs.get('po_number', '').strip():
            raise serializers.ValidationError({'po_number': 'PO number is required to create a purchase order.'})
        po_date = attrs.get('po_date')
        expiry_date = attrs.get('expiry_date')
        if po_date and expiry_date and expiry_date < po_date:
            raise serializers.ValidationError({'expiry_date': 'Expiry date cannot be before the PO date.'})
        return attrs
