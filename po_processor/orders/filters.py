import django_filters
from django.db.models import Q
from django.utils import timezone

from .models import PurchaseOrder
from .services import expiring_cutoff


class PurchaseOrderFilter(django_filters.FilterSet):
    """Filter purchase orders by text, derived status, customer and dates"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.CharFilter(method='filter_status', label='Status')
    customer = django_filters.CharFilter(field_name='customer_name', lookup_expr='icontains')
    date_from = django_filters.DateFilter(field_name='po_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='po_date', lookup_expr='lte')
    quotation = django_filters.CharFilter(field_name='quotation_reference', lookup_expr='icontains')

    class Meta:
        model = PurchaseOrder
        fields = ['search', 'status', 'customer', 'date_from', 'date_to', 'quotation']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(po_number__icontains=value) |
            Q(customer_name__icontains=value) |
            Q(items__item_code__icontains=value) |
            Q(items__item_name__icontains=value)
        ).distinct()

    def filter_status(self, queryset, name, value):
        # Matches the date-derived status rather than the stored one
        today = timezone.localdate()
        if value == 'expired':
            return queryset.filter(expiry_date__lt=today)
        if value == 'expiring_soon':
            return queryset.filter(expiry_date__gte=today, expiry_date__lte=expiring_cutoff(today))
        if value == 'active':
            return queryset.filter(expiry_date__gt=expiring_cutoff(today))
        return queryset
