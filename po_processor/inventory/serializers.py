from rest_framework import serializers

from po_processor.core.display import status_display

from .health import compute_health
from .models import InventoryMaterial


class InventoryMaterialSerializer(serializers.ModelSerializer):
    current_stock = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    predicted_demand = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    delta = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    stock_status = serializers.CharField(read_only=True)
    status_display = serializers.SerializerMethodField()
    health = serializers.SerializerMethodField()

    class Meta:
        model = InventoryMaterial
        fields = [
            'id', 'material_name', 'material_code', 'current_stock', 'predicted_demand',
            'delta', 'stock_status', 'status_display', 'health', 'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']

    def get_status_display(self, obj):
        return status_display('stock', obj.stock_status)

    def get_health(self, obj):
        return compute_health(obj.predicted_demand, obj.delta)


class StockUpdateSerializer(serializers.Serializer):
    current_stock = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
