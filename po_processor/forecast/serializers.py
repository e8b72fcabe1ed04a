from rest_framework import serializers


class PurchaseEventSerializer(serializers.Serializer):
    purchase_date = serializers.DateField()
    quantity = serializers.FloatField()
    unit = serializers.CharField()
    po_number = serializers.CharField()
    lead_time_days = serializers.IntegerField()


class MaterialForecastSerializer(serializers.Serializer):
    """Read-only representation of a material forecast"""
    material_code = serializers.CharField()
    material_name = serializers.CharField()
    average_lead_time_days = serializers.FloatField()
    consumption_rate_per_month = serializers.FloatField()
    predicted_next_order_date = serializers.DateField(allow_null=True)
    recommendation = serializers.CharField()
    recommendation_reason = serializers.CharField()
    should_stock = serializers.SerializerMethodField()
    purchase_history = PurchaseEventSerializer(many=True)
    total_quantity_last_12_months = serializers.FloatField()
    purchase_count_last_12_months = serializers.IntegerField()
    average_days_between_purchases = serializers.FloatField()
    purchase_frequency_consistency = serializers.FloatField()

    def get_should_stock(self, obj):
        return obj['recommendation'] == 'Stock'
