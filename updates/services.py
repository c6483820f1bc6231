import logging
import uuid
from datetime import date
from typing import Any, Dict, Optional, Tuple

from django.db import transaction

from updates.models import Update

logger = logging.getLogger(__name__)


def _parse_id(update_id) -> uuid.UUID:
    """Identifiers are opaque to callers; anything that isn't a UUID can't match."""
    try:
        return update_id if isinstance(update_id, uuid.UUID) else uuid.UUID(str(update_id))
    except (TypeError, ValueError, AttributeError) as exc:
        raise Update.DoesNotExist(f"Malformed update id: {update_id!r}") from exc


def create_update(fields: Dict[str, Any]) -> Update:
    """
    Persist a new update from already-validated model fields.

    Args:
        fields: Model field values (snake_case names)

    Returns:
        The stored Update, including generated id and timestamps
    """
    entry = Update.objects.create(**fields)
    logger.info(f"Created update {entry.pk} for {entry.employee_name} on {entry.date}")
    return entry


def list_updates(
    on_date: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    employee: Optional[str] = None,
):
    """
    Return active updates ordered by date descending, newest record first on ties.

    Args:
        on_date: Only updates whose date equals this exactly
        start: Inclusive lower bound on date
        end: Inclusive upper bound on date
        employee: Case-insensitive substring of the employee name
    """
    queryset = Update.objects.active()

    if on_date is not None:
        queryset = queryset.filter(date=on_date)
    if start is not None:
        queryset = queryset.filter(date__gte=start)
    if end is not None:
        queryset = queryset.filter(date__lte=end)
    if employee:
        queryset = queryset.filter(employee_name__icontains=employee)

    return queryset.newest_first()


def get_update(update_id) -> Update:
    """Raises Update.DoesNotExist for unknown, malformed or expired ids."""
    pk = _parse_id(update_id)
    try:
        return Update.objects.active().get(pk=pk)
    except Update.DoesNotExist:
        logger.debug(f"Update {pk} not found")
        raise


def change_update(update_id, changes: Dict[str, Any]) -> Tuple[Update, list]:
    """
    Apply a partial set of field changes to an existing update.

    Fields absent from ``changes`` are left untouched. ``updated_at`` is
    refreshed on every call, even when nothing else changes.

    Returns:
        Tuple of (entry, list of changed field names)
    """
    with transaction.atomic():
        entry = get_update(update_id)
        changed = []
        for field, value in changes.items():
            if getattr(entry, field) != value:
                setattr(entry, field, value)
                changed.append(field)
        entry.save()

    logger.info(f"Updated update {entry.pk}: {', '.join(changed) or 'no field changes'}")
    return entry, changed


def delete_update(update_id) -> bool:
    """
    Delete an active update.

    Returns:
        True if deleted, False if no active update matched
    """
    try:
        pk = _parse_id(update_id)
    except Update.DoesNotExist:
        return False

    deleted, _ = Update.objects.active().filter(pk=pk).delete()
    if deleted:
        logger.info(f"Deleted update {pk}")
    return bool(deleted)


def purge_expired(dry_run: bool = False) -> int:
    """
    Physically remove updates past their time-to-live.

    Returns:
        Number of expired updates found (and deleted unless dry_run)
    """
    expired = Update.objects.expired()
    if dry_run:
        return expired.count()
    deleted, _ = expired.delete()
    logger.info(f"Purged {deleted} expired updates")
    return deleted
