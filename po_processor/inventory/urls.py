from django.urls import path

from .views import material_list_create, material_detail, material_update_stock, material_analysis

urlpatterns = [
    path('inventory/materials/', material_list_create, name='material-list-create'),
    path('inventory/materials/<int:pk>/', material_detail, name='material-detail'),
    path('inventory/materials/<int:pk>/stock/', material_update_stock, name='material-update-stock'),
    path('inventory/materials/<int:pk>/analysis/', material_analysis, name='material-analysis'),
]
