"""URL configuration for the EstuArriendo project.

The `urlpatterns` list routes URLs to views. It includes both Django admin
and application‑level routers provided by Django Rest Framework and each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('django-admin/', admin.site.urls),
    # Application URLs
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/users/', include(('apps.users.urls', 'users'), namespace='users')),
    path('api/v1/locations/', include(('apps.locations.urls', 'locations'), namespace='locations')),
    path('api/v1/properties/', include(('apps.properties.urls', 'properties'), namespace='properties')),
    path('api/v1/', include(('apps.finances.urls', 'finances'), namespace='finances')),
    path('api/v1/verification/', include(('apps.verification.urls', 'verification'), namespace='verification')),
    path('api/v1/uploads/', include(('apps.uploads.urls', 'uploads'), namespace='uploads')),
    path('api/v1/notifications/', include(('apps.notifications.urls', 'notifications'), namespace='notifications')),
    path('api/v1/favorites/', include(('apps.favorites.urls', 'favorites'), namespace='favorites')),
    path(
        'api/v1/student-requests/',
        include(('apps.student_requests.urls', 'student_requests'), namespace='student_requests'),
    ),
    # Super admin back office
    path('api/v1/admin/', include(('apps.administration.urls', 'administration'), namespace='administration')),
    # API schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
