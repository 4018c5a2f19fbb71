from django.contrib import admin
from django.http import HttpResponse
from django.urls import include, path
from django.views.generic import RedirectView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False), name='db-dashboard'),
    path('favicon.ico', lambda request: HttpResponse(status=204), name='favicon'),
    path('admin/', admin.site.urls),
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/batches/', include('batches.urls')),
    path('api/sessions/', include('batches.session_urls')),
    path('api/attendance/', include('attendance.urls')),
    path('api/activity-logs/', include('activity.urls')),
]
