from django.urls import path

from .views import (
    quotation_list_create, quotation_detail, quotation_price_items,
    quotation_send, quotation_accept, quotation_reject,
    quotation_expire_overdue, quotation_history,
)

urlpatterns = [
    path('quotations/', quotation_list_create, name='quotation-list-create'),
    path('quotations/history/', quotation_history, name='quotation-history'),
    path('quotations/expire-overdue/', quotation_expire_overdue, name='quotation-expire-overdue'),
    path('quotations/<int:pk>/', quotation_detail, name='quotation-detail'),
    path('quotations/<int:pk>/price-items/', quotation_price_items, name='quotation-price-items'),
    path('quotations/<int:pk>/send/', quotation_send, name='quotation-send'),
    path('quotations/<int:pk>/accept/', quotation_accept, name='quotation-accept'),
    path('quotations/<int:pk>/reject/', quotation_reject, name='quotation-reject'),
]
