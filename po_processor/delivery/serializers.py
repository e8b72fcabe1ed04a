from django.db import transaction
from rest_framework import serializers

from po_processor.core.currency import format_amount
from po_processor.core.display import status_display
from po_processor.core.number_words import amount_in_words
from po_processor.core.utils import replace_items

from .models import DeliveryDocument, DeliveryItem
from .services import next_delivery_document_number, update_totals


class DeliveryItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeliveryItem
        fields = ['id', 'item_name', 'item_code', 'description', 'quantity', 'unit', 'unit_price', 'total']
        read_only_fields = ['id']


class DeliveryDocumentSerializer(serializers.ModelSerializer):
    items = DeliveryItemSerializer(many=True, required=False)
    document_number = serializers.CharField(required=False, allow_blank=True, max_length=100)
    vat_percent = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, required=False)
    status_display = serializers.SerializerMethodField()
    type_display = serializers.SerializerMethodField()
    amount_in_words = serializers.SerializerMethodField()
    formatted_total = serializers.SerializerMethodField()
    po_number = serializers.SerializerMethodField()
    supplier_order_number = serializers.SerializerMethodField()

    class Meta:
        model = DeliveryDocument
        fields = [
            'id', 'document_number', 'document_type', 'type_display', 'document_date',
            'customer_name', 'customer_address', 'customer_email', 'customer_phone', 'customer_trn',
            'subtotal', 'vat_percent', 'vat_amount', 'total_amount', 'formatted_total', 'amount_in_words',
            'currency', 'terms', 'notes', 'pdf_path', 'status', 'status_display',
            'purchase_order', 'po_number', 'supplier_order', 'supplier_order_number',
            'items', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'subtotal', 'vat_amount', 'total_amount', 'status',
            'created_by', 'created_at', 'updated_at',
        ]

    def get_status_display(self, obj):
        return status_display('delivery_status', obj.status)

    def get_type_display(self, obj):
        return status_display('delivery_type', obj.document_type)

    def get_amount_in_words(self, obj):
        return amount_in_words(obj.total_amount, obj.currency)

    def get_formatted_total(self, obj):
        return format_amount(obj.total_amount, obj.currency)

    def get_po_number(self, obj):
        return obj.purchase_order.po_number if obj.purchase_order_id else None

    def get_supplier_order_number(self, obj):
        return obj.supplier_order.order_number if obj.supplier_order_id else None

    def validate_document_number(self, value):
        value = value.strip()
        if value and DeliveryDocument.objects.filter(document_number=value).exclude(
            pk=getattr(self.instance, 'pk', None)
        ).exists():
            raise serializers.ValidationError('A delivery document with this number already exists.')
        return value

    def create(self, validated_data):
        items_data = validated_data.pop('items', [])
        with transaction.atomic():
            if not validated_data.get('document_number'):
                validated_data['document_number'] = next_delivery_document_number(validated_data.get('document_date'))
            document = DeliveryDocument.objects.create(**validated_data)
            replace_items(document, items_data, DeliveryItem, 'document')
            update_totals(document)
        return document

    def update(self, instance, validated_data):
        items_data = validated_data.pop('items', None)
        if not validated_data.get('document_number', True):
            validated_data.pop('document_number')
        with transaction.atomic():
            instance = super().update(instance, validated_data)
            if items_data is not None:
                replace_items(instance, items_data, DeliveryItem, 'document')
            update_totals(instance)
        return instance


class CreateDeliveryFromPurchaseOrderSerializer(serializers.Serializer):
    purchase_order = serializers.IntegerField()
    document_type = serializers.ChoiceField(choices=DeliveryDocument.TYPE_CHOICES, default='both')
    vat_percent = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, required=False)
    supplier_order = serializers.IntegerField(required=False, allow_null=True)
    customer_trn = serializers.CharField(required=False, allow_blank=True, default='')
