from django.urls import path

from .views import forecast_material_codes, forecast_material, forecast_search

urlpatterns = [
    path('forecast/', forecast_search, name='forecast-search'),
    path('forecast/materials/', forecast_material_codes, name='forecast-material-codes'),
    path('forecast/materials/<str:code>/', forecast_material, name='forecast-material'),
]
