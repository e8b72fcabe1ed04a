import django_filters
from django.db.models import Q

from .models import SupplierOrder


class SupplierOrderFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.CharFilter(field_name='status')
    purchase_order = django_filters.NumberFilter(field_name='purchase_order_id')
    date_from = django_filters.DateFilter(field_name='order_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='order_date', lookup_expr='lte')

    class Meta:
        model = SupplierOrder
        fields = ['search', 'status', 'purchase_order', 'date_from', 'date_to']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(order_number__icontains=value) |
            Q(supplier_name__icontains=value)
        )
