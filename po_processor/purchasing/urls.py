from django.urls import path

from .views import (
    supplier_order_list_create, supplier_order_detail,
    supplier_order_status, supplier_order_from_purchase_order,
)

urlpatterns = [
    path('supplier-orders/', supplier_order_list_create, name='supplier-order-list-create'),
    path('supplier-orders/from-purchase-order/', supplier_order_from_purchase_order, name='supplier-order-from-po'),
    path('supplier-orders/<int:pk>/', supplier_order_detail, name='supplier-order-detail'),
    path('supplier-orders/<int:pk>/status/', supplier_order_status, name='supplier-order-status'),
]
