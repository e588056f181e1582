"""
URL configuration for wyrenow_backend project.
"""
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/registration/', include('core.registration.urls')),
    path('api/tree/', include('core.binary.urls')),
    path('api/settings/', include('core.settings.urls')),
]
