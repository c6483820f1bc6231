from django.urls import path

from dashboard import views

app_name = "dashboard"

urlpatterns = [
    path("", views.dashboard, name="index"),
    path("update", views.add_update, name="add"),
    path("update/<str:pk>", views.edit_update, name="edit"),
    path("update/<str:pk>/delete", views.remove_update, name="delete"),
]
