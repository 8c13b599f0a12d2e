from django.urls import path
from . import views

urlpatterns = [
    # 1. Dashboard (Homepage for the app)
    path('', views.dashboard, name='dashboard'),

    # --- Trip URLs ---
    path('trips/new/', views.trip_create, name='trip_create'),
    path('trips/preview/', views.trip_preview, name='trip_preview'),
    path('trips/<int:pk>/', views.trip_detail, name='trip_detail'),
    path('trips/<int:pk>/edit/', views.trip_update, name='trip_update'),
    path('trips/<int:pk>/delete/', views.trip_delete, name='trip_delete'),
    path('trips/<int:pk>/report/', views.trip_report, name='trip_report'),

    # --- Analytics ---
    path('analytics/', views.analytics, name='analytics'),

    # --- Trucks (grouped by truck number) ---
    path('trucks/', views.truck_list, name='truck_list'),
    path('trucks/<str:truck_number>/', views.truck_detail, name='truck_detail'),
]
