from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from updates.views import HealthCheckView, PingView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("health", HealthCheckView.as_view(), name="health"),
    path("ping", PingView.as_view(), name="ping"),
    path("api/schema", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/", include("updates.urls")),
    path("", include("dashboard.urls")),
]
