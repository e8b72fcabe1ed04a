from django.db import transaction
from rest_framework import serializers

from po_processor.core.currency import format_amount
from po_processor.core.display import status_display
from po_processor.core.utils import replace_items

from .models import SupplierOrder, SupplierOrderItem
from .services import next_supplier_order_number, recalculate_total


class SupplierOrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = SupplierOrderItem
        fields = ['id', 'item_name', 'item_code', 'description', 'quantity', 'unit', 'unit_price', 'total']
        read_only_fields = ['id']


class SupplierOrderSerializer(serializers.ModelSerializer):
    items = SupplierOrderItemSerializer(many=True, required=False)
    order_number = serializers.CharField(required=False, allow_blank=True, max_length=100)
    status_display = serializers.SerializerMethodField()
    po_number = serializers.SerializerMethodField()
    delivery_document = serializers.SerializerMethodField()
    formatted_total = serializers.SerializerMethodField()

    class Meta:
        model = SupplierOrder
        fields = [
            'id', 'order_number', 'order_date', 'expected_delivery_date',
            'supplier_name', 'supplier_address', 'supplier_email', 'supplier_phone',
            'total_amount', 'formatted_total', 'currency', 'terms', 'notes',
            'status', 'status_display', 'purchase_order', 'po_number', 'delivery_document',
            'items', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['total_amount', 'status', 'created_by', 'created_at', 'updated_at']

    def get_status_display(self, obj):
        return status_display('supplier_order', obj.status)

    def get_po_number(self, obj):
        return obj.purchase_order.po_number if obj.purchase_order_id else None

    def get_delivery_document(self, obj):
        document = obj.delivery_document
        if document is None:
            return None
        return {'id': document.id, 'document_number': document.document_number, 'status': document.status}

    def get_formatted_total(self, obj):
        return format_amount(obj.total_amount, obj.currency)

    def validate_order_number(self, value):
        value = value.strip()
        if value and SupplierOrder.objects.filter(order_number=value).exclude(
            pk=getattr(self.instance, 'pk', None)
        ).exists():
            raise serializers.ValidationError('A supplier order with this number already exists.')
        return value

    def create(self, validated_data):
        items_data = validated_data.pop('items', [])
        with transaction.atomic():
            if not validated_data.get('order_number'):
                validated_data['order_number'] = next_supplier_order_number(validated_data.get('order_date'))
            order = SupplierOrder.objects.create(**validated_data)
            replace_items(order, items_data, SupplierOrderItem, 'supplier_order')
            recalculate_total(order)
        return order

    def update(self, instance, validated_data):
        items_data = validated_data.pop('items', None)
        if not validated_data.get('order_number', True):
            validated_data.pop('order_number')
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if items_data is not None:
                replace_items(instance, items_data, SupplierOrderItem, 'supplier_order')
                recalculate_total(instance)
        return instance


class SupplierOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SupplierOrder.STATUS_CHOICES)


class SupplierDetailsSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    address = serializers.CharField(required=False, allow_blank=True, default='')
    email = serializers.CharField(required=False, allow_blank=True, default='')
    phone = serializers.CharField(required=False, allow_blank=True, default='')


class CreateFromPurchaseOrderSerializer(serializers.Serializer):
    purchase_order = serializers.IntegerField()
    supplier = SupplierDetailsSerializer()
    item_codes = serializers.ListField(child=serializers.CharField(), required=False, allow_empty=True)
    expected_delivery_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
