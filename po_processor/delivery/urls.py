from django.urls import path

from .views import (
    delivery_document_list_create, delivery_document_detail,
    delivery_document_from_purchase_order,
    delivery_document_generate, delivery_document_send,
)

urlpatterns = [
    path('delivery-documents/', delivery_document_list_create, name='delivery-document-list-create'),
    path('delivery-documents/from-purchase-order/', delivery_document_from_purchase_order, name='delivery-document-from-po'),
    path('delivery-documents/<int:pk>/', delivery_document_detail, name='delivery-document-detail'),
    path('delivery-documents/<int:pk>/generate/', delivery_document_generate, name='delivery-document-generate'),
    path('delivery-documents/<int:pk>/send/', delivery_document_send, name='delivery-document-send'),
]
