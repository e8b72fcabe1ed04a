from django.db import transaction
from rest_framework import serializers

from po_processor.core.currency import format_amount
from po_processor.core.display import status_display
from po_processor.core.utils import replace_items

from .models import LineItem, PurchaseOrder
from .services import recalculate_total


class LineItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = LineItem
        fields = ['id', 'item_name', 'item_code', 'description', 'quantity', 'unit', 'unit_price', 'total']
        read_only_fields = ['id']


class PurchaseOrderSerializer(serializers.ModelSerializer):
    items = LineItemSerializer(many=True, required=False)
    status = serializers.SerializerMethodField()
    status_display = serializers.SerializerMethodField()
    days_until_expiry = serializers.SerializerMethodField()
    is_expired = serializers.SerializerMethodField()
    is_expiring_soon = serializers.SerializerMethodField()
    formatted_total = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'po_number', 'po_date', 'expiry_date',
            'customer_name', 'customer_address', 'customer_email', 'customer_phone',
            'total_amount', 'formatted_total', 'currency', 'terms', 'notes', 'pdf_path',
            'status', 'status_display', 'days_until_expiry', 'is_expired', 'is_expiring_soon',
            'quotation_reference', 'items', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['created_by', 'created_at', 'updated_at']

    def get_status(self, obj):
        return obj.effective_status()

    def get_status_display(self, obj):
        return status_display('purchase_order', obj.effective_status())

    def get_days_until_expiry(self, obj):
        return obj.days_until_expiry()

    def get_is_expired(self, obj):
        return obj.is_expired()

    def get_is_expiring_soon(self, obj):
        return obj.is_expiring_soon()

    def get_formatted_total(self, obj):
        return format_amount(obj.total_amount, obj.currency)

    def validate(self, attrs):
        po_date = attrs.get('po_date', getattr(self.instance, 'po_date', None))
        expiry_date = attrs.get('expiry_date', getattr(self.instance, 'expiry_date', None))
        if po_date and expiry_date and expiry_date < po_date:
            raise serializers.ValidationError({'expiry_date': 'Expiry date cannot be before the PO date.'})
        return attrs

    def create(self, validated_data):
        items_data = validated_data.pop('items', [])
        with transaction.atomic():
            purchase_order = PurchaseOrder.objects.create(**validated_data)
            replace_items(purchase_order, items_data, LineItem, 'purchase_order')
            if not validated_data.get('total_amount'):
                recalculate_total(purchase_order)
        return purchase_order

    def update(self, instance, validated_data):
        items_data = validated_data.pop('items', None)
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if items_data is not None:
                replace_items(instance, items_data, LineItem, 'purchase_order')
                if not validated_data.get('total_amount'):
                    recalculate_total(instance)
        return instance
