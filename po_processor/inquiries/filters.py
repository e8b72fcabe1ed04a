import django_filters
from django.db.models import Q

from .models import CustomerInquiry


class CustomerInquiryFilter(django_filters.FilterSet):
    """Inquiry list filter; status=quoted also matches partially quoted inquiries"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    status = django_filters.CharFilter(method='filter_status', label='Status')
    date_from = django_filters.DateFilter(field_name='inquiry_date', lookup_expr='gte')
    date_to = django_filters.DateFilter(field_name='inquiry_date', lookup_expr='lte')

    class Meta:
        model = CustomerInquiry
        fields = ['search', 'status', 'date_from', 'date_to']

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(inquiry_number__icontains=value) |
            Q(customer_name__icontains=value)
        )

    def filter_status(self, queryset, name, value):
        if value == 'quoted':
            return queryset.filter(status__in=['quoted', 'partially_quoted'])
        return queryset.filter(status=value)
