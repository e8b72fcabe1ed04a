import django_filters
from django.db.models import Q

from .models import DeliveryDocument


class DeliveryDocumentFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.CharFilter(field_name='status')
    document_type = django_filters.CharFilter(field_name='document_type')
    date_from = django_filters.DateFilter(field_name='document_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='document_date', lookup_expr='lte')

    class Meta:
        model = DeliveryDocument
        fields = ['search', 'status', 'document_type', 'date_from', 'date_to']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(document_number__icontains=value) |
            Q(customer_name__icontains=value) |
            Q(purchase_order__po_number__icontains=value)
        )
