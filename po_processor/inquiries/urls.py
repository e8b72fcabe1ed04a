from django.urls import path

from .views import (
    inquiry_list_create, inquiry_detail,
    inquiry_mark_reviewed, inquiry_create_quotation,
)

urlpatterns = [
    path('inquiries/', inquiry_list_create, name='inquiry-list-create'),
    path('inquiries/<int:pk>/', inquiry_detail, name='inquiry-detail'),
    path('inquiries/<int:pk>/review/', inquiry_mark_reviewed, name='inquiry-mark-reviewed'),
    path('inquiries/<int:pk>/quotation/', inquiry_create_quotation, name='inquiry-create-quotation'),
]
