from django.utils.dateparse import parse_datetime
from rest_framework import serializers

from updates.models import IssueStatus, Update

OPTIONAL_TEXT_FIELDS = ("github_issue_link", "issue_description", "build_number")


class CalendarDateField(serializers.DateField):
    """Date field that also accepts full ISO datetimes and keeps the date part."""

    def to_internal_value(self, value):
        try:
            return super().to_internal_value(value)
        except serializers.ValidationError as exc:
            try:
                parsed = parse_datetime(value) if isinstance(value, str) else None
            except ValueError:
                parsed = None
            if parsed is None:
                raise exc
            return parsed.date()


class UpdateSerializer(serializers.ModelSerializer):
    """Serializer for daily updates, exposing camelCase field names."""

    employeeName = serializers.CharField(source="employee_name", max_length=255)
    date = CalendarDateField()
    updates = serializers.CharField()
    githubIssueLink = serializers.URLField(
        source="github_issue_link",
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
        help_text="Optional link to a related GitHub issue.",
    )
    issueDescription = serializers.CharField(
        source="issue_description",
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    buildNumber = serializers.CharField(
        source="build_number",
        max_length=100,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    issueStatus = serializers.ChoiceField(
        source="issue_status",
        choices=IssueStatus.choices,
        required=False,
        help_text="One of N/A, Opened, Closed. Defaults to N/A.",
    )
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Update
        fields = [
            "id",
            "employeeName",
            "date",
            "updates",
            "githubIssueLink",
            "issueDescription",
            "buildNumber",
            "issueStatus",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "createdAt", "updatedAt"]

    def validate(self, attrs):
        # Optional text columns are stored as empty strings, never NULL.
        for field in OPTIONAL_TEXT_FIELDS:
            if field in attrs and attrs[field] is None:
                attrs[field] = ""
        return attrs


class UpdateListQuerySerializer(serializers.Serializer):
    """Query parameters accepted by the list endpoint."""

    date = CalendarDateField(required=False, help_text="Only updates on exactly this date")
    start = CalendarDateField(required=False, help_text="Inclusive lower bound on date")
    end = CalendarDateField(required=False, help_text="Inclusive upper bound on date")
    employee = serializers.CharField(
        required=False,
        allow_blank=True,
        help_text="Case-insensitive substring of the employee name",
    )

    def validate(self, attrs):
        start, end = attrs.get("start"), attrs.get("end")
        if start and end and start > end:
            raise serializers.ValidationError("start date must be on or before end date")
        return attrs


class MessageSerializer(serializers.Serializer):
    message = serializers.CharField()
