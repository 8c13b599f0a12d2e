from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # 1. Django Admin Interface
    path('admin/', admin.site.urls),

    # 2. Include the 'trips' app URLs at the root path ('')
    # http://127.0.0.1:8000/ goes to the trips dashboard.
    path('', include('trips.urls')),
]
