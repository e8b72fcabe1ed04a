from django.urls import path
from . import views

urlpatterns = [
    path('reports/dashboard/', views.dashboard_stats, name='dashboard-stats'),
]
