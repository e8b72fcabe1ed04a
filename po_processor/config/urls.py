"""
URL configuration for the PO Processor API.

Every app mounts its routes under /api/v1/.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "PO Processor Admin Panel"
admin.site.site_title = "PO Processor Admin Portal"
admin.site.index_title = "Inquiries, quotations, orders and deliveries"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('po_processor.core.urls')),
    path('api/v1/', include('po_processor.inquiries.urls')),
    path('api/v1/', include('po_processor.quotations.urls')),
    path('api/v1/', include('po_processor.orders.urls')),
    path('api/v1/', include('po_processor.purchasing.urls')),
    path('api/v1/', include('po_processor.delivery.urls')),
    path('api/v1/', include('po_processor.inventory.urls')),
    path('api/v1/', include('po_processor.forecast.urls')),
    path('api/v1/', include('po_processor.reports.urls')),
]
