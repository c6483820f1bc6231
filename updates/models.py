import re
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

# Records are removed 30 days after creation unless overridden in settings.
DEFAULT_TTL_SECONDS = 2592000

BULLET_PREFIX = re.compile(r"^\s*(?:[-*•]\s+)?")


def get_ttl_seconds() -> int:
    return int(getattr(settings, "UPDATE_TTL_SECONDS", DEFAULT_TTL_SECONDS))


def expiry_cutoff():
    """Creation timestamps older than this are expired."""
    return timezone.now() - timedelta(seconds=get_ttl_seconds())


class IssueStatus(models.TextChoices):
    NOT_APPLICABLE = "N/A", "N/A"
    OPENED = "Opened", "Opened"
    CLOSED = "Closed", "Closed"


class UpdateQuerySet(models.QuerySet):
    def active(self):
        return self.filter(created_at__gte=expiry_cutoff())

    def expired(self):
        return self.filter(created_at__lt=expiry_cutoff())

    def newest_first(self):
        return self.order_by("-date", "-created_at")


class Update(models.Model):
    """One employee's dated status entry with optional issue metadata."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    employee_name = models.CharField(max_length=255)
    date = models.DateField(db_index=True)
    updates = models.TextField()
    github_issue_link = models.URLField(max_length=500, blank=True, default="")
    issue_description = models.TextField(blank=True, default="")
    build_number = models.CharField(max_length=100, blank=True, default="")
    issue_status = models.CharField(
        max_length=10,
        choices=IssueStatus.choices,
        default=IssueStatus.NOT_APPLICABLE,
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UpdateQuerySet.as_manager()

    class Meta:
        ordering = ["-date", "-created_at"]

    def __str__(self) -> str:
        return f"{self.employee_name} ({self.date})"

    def items(self) -> list[str]:
        """Split the free-form text into line items, dropping bullet markers."""
        lines = (BULLET_PREFIX.sub("", line, count=1).strip() for line in self.updates.splitlines())
        return [line for line in lines if line]

    @property
    def expires_at(self):
        if self.created_at is None:
            return None
        return self.created_at + timedelta(seconds=get_ttl_seconds())
