from django.urls import path

from .views import (
    purchase_order_list_create, purchase_order_detail,
    purchase_order_expiring, purchase_order_expired,
)

urlpatterns = [
    path('purchase-orders/', purchase_order_list_create, name='purchase-order-list-create'),
    path('purchase-orders/expiring/', purchase_order_expiring, name='purchase-order-expiring'),
    path('purchase-orders/expired/', purchase_order_expired, name='purchase-order-expired'),
    path('purchase-orders/<int:pk>/', purchase_order_detail, name='purchase-order-detail'),
]
