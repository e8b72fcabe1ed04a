import django_filters
from django.conf import settings
from django.db.models import Q
from django.utils import timezone
from datetime import timedelta

from .models import Quotation


class QuotationFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.CharFilter(field_name='status')
    customer = django_filters.CharFilter(field_name='customer_name', lookup_expr='icontains')
    expiring = django_filters.BooleanFilter(method='filter_expiring', label='Expiring soon')
    date_from = django_filters.DateFilter(field_name='quotation_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='quotation_date', lookup_expr='lte')

    class Meta:
        model = Quotation
        fields = ['search', 'status', 'customer', 'expiring', 'date_from', 'date_to']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(quotation_number__icontains=value) |
            Q(customer_name__icontains=value)
        )

    def filter_expiring(self, queryset, name, value):
        if not value:
            return queryset
        today = timezone.localdate()
        cutoff = today + timedelta(days=settings.PO_PROCESSOR['EXPIRY_ALERT_DAYS'])
        return queryset.filter(validity_date__gte=today, validity_date__lte=cutoff)
