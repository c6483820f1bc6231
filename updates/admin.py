from django.contrib import admin

from updates.models import Update


@admin.register(Update)
class UpdateAdmin(admin.ModelAdmin):
    list_display = ("employee_name", "date", "issue_status", "build_number", "created_at")
    list_filter = ("issue_status", "date")
    search_fields = ("employee_name", "updates", "issue_description")
    ordering = ("-date", "-created_at")
    readonly_fields = ("id", "created_at", "updated_at")
