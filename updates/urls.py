from django.urls import path

from updates.views import UpdateDetailView, UpdateListView

app_name = "updates"

urlpatterns = [
    path("updates", UpdateListView.as_view(), name="update-list"),
    path("updates/<str:pk>", UpdateDetailView.as_view(), name="update-detail"),
]
