import os
import subprocess
import sys
from datetime import date, timedelta
from io import StringIO
from unittest import mock

from django.conf import settings
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import DatabaseError, OperationalError
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from updates.models import IssueStatus, Update


def make_update(**overrides):
    fields = {
        "employee_name": "Alice",
        "date": date(2024, 5, 1),
        "updates": "Fixed login bug\nReviewed PR",
    }
    fields.update(overrides)
    return Update.objects.create(**fields)


def age(entry, days):
    """Backdate an update's creation timestamp."""
    Update.objects.filter(pk=entry.pk).update(created_at=timezone.now() - timedelta(days=days))


class UpdateCreateApiTests(APITestCase):
    def setUp(self):
        self.url = reverse("updates:update-list")

    def test_create_with_required_fields_defaults_status(self):
        payload = {"employeeName": "Alice", "date": "2024-05-01", "updates": "Shipped build"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["employeeName"], "Alice")
        self.assertEqual(response.data["date"], "2024-05-01")
        self.assertEqual(response.data["updates"], "Shipped build")
        self.assertEqual(response.data["issueStatus"], "N/A")
        self.assertEqual(response.data["githubIssueLink"], "")
        self.assertIn("id", response.data)
        self.assertIsNotNone(response.data["createdAt"])
        self.assertIsNotNone(response.data["updatedAt"])
        self.assertEqual(Update.objects.count(), 1)

    def test_create_with_optional_fields(self):
        payload = {
            "employeeName": "Bob",
            "date": "2024-05-02",
            "updates": "- Investigated crash\n- Filed issue",
            "githubIssueLink": "https://github.com/acme/app/issues/42",
            "issueDescription": "Crash on startup",
            "buildNumber": "1.4.2-rc1",
            "issueStatus": "Opened",
        }
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        entry = Update.objects.get(pk=response.data["id"])
        self.assertEqual(entry.github_issue_link, "https://github.com/acme/app/issues/42")
        self.assertEqual(entry.issue_status, IssueStatus.OPENED)
        self.assertEqual(entry.build_number, "1.4.2-rc1")

    def test_create_accepts_iso_datetime_for_date(self):
        payload = {"employeeName": "Alice", "date": "2024-05-01T09:30:00.000Z", "updates": "x"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["date"], "2024-05-01")

    def test_null_optional_fields_are_stored_blank(self):
        payload = {
            "employeeName": "Alice",
            "date": "2024-05-01",
            "updates": "x",
            "githubIssueLink": None,
            "buildNumber": None,
        }
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["githubIssueLink"], "")
        self.assertEqual(response.data["buildNumber"], "")

    def test_missing_required_fields_return_400(self):
        complete = {"employeeName": "Alice", "date": "2024-05-01", "updates": "x"}
        for field in complete:
            payload = {key: value for key, value in complete.items() if key != field}
            with self.subTest(missing=field):
                response = self.client.post(self.url, payload, format="json")
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn(field, response.data["errors"])
                self.assertIn(field, response.data["message"])
        self.assertEqual(Update.objects.count(), 0)

    def test_unparseable_date_returns_400(self):
        payload = {"employeeName": "Alice", "date": "not-a-date", "updates": "x"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("date", response.data["errors"])

    def test_unknown_issue_status_returns_400(self):
        payload = {"employeeName": "Alice", "date": "2024-05-01", "updates": "x", "issueStatus": "Pending"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("issueStatus", response.data["errors"])

    def test_invalid_issue_link_returns_400(self):
        payload = {"employeeName": "Alice", "date": "2024-05-01", "updates": "x", "githubIssueLink": "nope"}
        response = self.client.post(self.url, payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class UpdateListApiTests(APITestCase):
    def setUp(self):
        self.url = reverse("updates:update-list")

    def test_list_returns_all_ordered_by_date_descending(self):
        make_update(employee_name="A", date=date(2024, 5, 1))
        make_update(employee_name="B", date=date(2024, 5, 3))
        make_update(employee_name="C", date=date(2024, 5, 2))

        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["date"] for item in response.data], ["2024-05-03", "2024-05-02", "2024-05-01"])

    def test_date_filter_matches_exactly(self):
        make_update(employee_name="A", date=date(2024, 5, 1))
        make_update(employee_name="B", date=date(2024, 5, 2))
        make_update(employee_name="C", date=date(2024, 5, 2))

        response = self.client.get(self.url, {"date": "2024-05-02"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(sorted(item["employeeName"] for item in response.data), ["B", "C"])

    def test_range_and_employee_filters(self):
        make_update(employee_name="Alice Smith", date=date(2024, 5, 1))
        make_update(employee_name="alice jones", date=date(2024, 5, 5))
        make_update(employee_name="Bob", date=date(2024, 5, 3))
        make_update(employee_name="Alice Smith", date=date(2024, 5, 10))

        response = self.client.get(self.url, {"start": "2024-05-01", "end": "2024-05-05", "employee": "ALICE"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["employeeName"] for item in response.data], ["alice jones", "Alice Smith"])

    def test_empty_filter_is_ignored(self):
        make_update()
        response = self.client.get(self.url, {"date": ""})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_bad_date_filter_returns_400(self):
        response = self.client.get(self.url, {"date": "yesterday"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("message", response.data)

    def test_inverted_range_returns_400(self):
        response = self.client.get(self.url, {"start": "2024-05-05", "end": "2024-05-01"})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_expired_updates_are_not_listed(self):
        fresh = make_update(employee_name="Fresh")
        stale = make_update(employee_name="Stale")
        age(stale, 31)

        response = self.client.get(self.url)
        self.assertEqual([item["id"] for item in response.data], [str(fresh.pk)])

    @override_settings(UPDATE_TTL_SECONDS=3600)
    def test_ttl_is_configurable(self):
        entry = make_update()
        Update.objects.filter(pk=entry.pk).update(created_at=timezone.now() - timedelta(hours=2))
        response = self.client.get(self.url)
        self.assertEqual(response.data, [])

    def test_store_failure_returns_500(self):
        with mock.patch("updates.views.list_updates", side_effect=DatabaseError("store unreachable")):
            response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["message"], "store unreachable")

    def test_unexpected_error_returns_500_and_is_logged(self):
        with mock.patch("updates.views.list_updates", side_effect=RuntimeError("boom")):
            with self.assertLogs("updates.exceptions", level="ERROR") as logs:
                response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {"message": "Internal server error"})
        self.assertIn("Unhandled error in UpdateListView", logs.output[0])


class UpdateDetailApiTests(APITestCase):
    def detail_url(self, pk):
        return reverse("updates:update-detail", args=[pk])

    def test_get_by_id(self):
        entry = make_update()
        response = self.client.get(self.detail_url(entry.pk))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], str(entry.pk))
        self.assertEqual(response.data["employeeName"], "Alice")

    def test_missing_id_returns_404_for_get_put_delete(self):
        for pk in ["0b7e7c0e-5c1a-4c55-9a53-8c1f0c1c0c1c", "not-a-uuid"]:
            url = self.detail_url(pk)
            with self.subTest(pk=pk):
                self.assertEqual(self.client.get(url).status_code, status.HTTP_404_NOT_FOUND)
                response = self.client.put(url, {"employeeName": "X"}, format="json")
                self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
                response = self.client.delete(url)
                self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
                self.assertEqual(response.data, {"message": "Update not found"})

    def test_expired_update_is_not_found(self):
        entry = make_update()
        age(entry, 31)
        self.assertEqual(self.client.get(self.detail_url(entry.pk)).status_code, status.HTTP_404_NOT_FOUND)

    def test_update_changes_only_supplied_fields(self):
        entry = make_update(build_number="100", issue_description="Flaky test")
        old_stamp = timezone.now() - timedelta(days=1)
        Update.objects.filter(pk=entry.pk).update(updated_at=old_stamp)

        payload = {"updates": "Rewrote test", "issueStatus": "Closed", "buildNumber": "101"}
        response = self.client.put(self.detail_url(entry.pk), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["updates"], "Rewrote test")
        self.assertEqual(response.data["issueStatus"], "Closed")

        entry.refresh_from_db()
        self.assertEqual(entry.build_number, "101")
        self.assertEqual(entry.employee_name, "Alice")
        self.assertEqual(entry.date, date(2024, 5, 1))
        self.assertEqual(entry.issue_description, "Flaky test")
        self.assertGreater(entry.updated_at, old_stamp)

    def test_update_can_move_date(self):
        entry = make_update()
        response = self.client.patch(self.detail_url(entry.pk), {"date": "2024-06-01"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entry.refresh_from_db()
        self.assertEqual(entry.date, date(2024, 6, 1))

    def test_update_ignores_read_only_fields(self):
        entry = make_update()
        created_at = entry.created_at
        payload = {"id": "0b7e7c0e-5c1a-4c55-9a53-8c1f0c1c0c1c", "createdAt": "2000-01-01T00:00:00Z"}
        response = self.client.put(self.detail_url(entry.pk), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], str(entry.pk))
        entry.refresh_from_db()
        self.assertEqual(entry.created_at, created_at)

    def test_update_with_invalid_input_returns_400(self):
        entry = make_update()
        for payload in ({"employeeName": ""}, {"issueStatus": "Maybe"}, {"date": "31/12/2024"}):
            with self.subTest(payload=payload):
                response = self.client.put(self.detail_url(entry.pk), payload, format="json")
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        entry.refresh_from_db()
        self.assertEqual(entry.employee_name, "Alice")

    def test_delete_then_get_returns_404(self):
        entry = make_update()
        url = self.detail_url(entry.pk)
        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"message": "Update deleted successfully"})

        response = self.client.get(url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class LivenessApiTests(APITestCase):
    def test_health(self):
        response = self.client.get(reverse("health"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"status": "ok"})

    def test_ping_returns_timestamp(self):
        with self.assertLogs("updates.views", level="INFO") as logs:
            response = self.client.get(reverse("ping"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "pong")
        self.assertIn("T", response.data["timestamp"])
        self.assertIn("[PING] Hit at", logs.output[0])

    def test_schema_is_served(self):
        response = self.client.get(reverse("schema"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class UpdateModelTests(TestCase):
    def test_items_strip_bullets_and_blank_lines(self):
        entry = make_update(updates="- first\n\n* second\n• third\nplain")
        self.assertEqual(entry.items(), ["first", "second", "third", "plain"])

    def test_expires_thirty_days_after_creation(self):
        entry = make_update()
        self.assertEqual(entry.expires_at - entry.created_at, timedelta(days=30))


class ManagementCommandTests(TestCase):
    def test_purge_expired_updates(self):
        keep = make_update()
        drop = make_update()
        age(drop, 45)

        out = StringIO()
        call_command("purge_expired_updates", "--dry-run", stdout=out)
        self.assertIn("1 updates", out.getvalue())
        self.assertEqual(Update.objects.count(), 2)

        out = StringIO()
        call_command("purge_expired_updates", stdout=out)
        self.assertIn("Deleted 1 updates", out.getvalue())
        self.assertEqual(list(Update.objects.values_list("pk", flat=True)), [keep.pk])

    def test_serve_fails_when_database_unreachable(self):
        with mock.patch("updates.management.commands.serve.connection") as connection:
            connection.ensure_connection.side_effect = OperationalError("connection refused")
            with mock.patch("updates.management.commands.serve.call_command") as runserver:
                with self.assertRaises(CommandError):
                    call_command("serve", stdout=StringIO())
        runserver.assert_not_called()

    @override_settings(PORT=8123)
    def test_serve_starts_runserver_on_configured_port(self):
        with mock.patch("updates.management.commands.serve.call_command") as runserver:
            call_command("serve", "--noreload", stdout=StringIO())
        runserver.assert_called_once_with("runserver", "0.0.0.0:8123", use_reloader=False)

    def test_startup_fails_without_database_url(self):
        env = {key: value for key, value in os.environ.items() if key != "DATABASE_URL"}
        env["DJANGO_SETTINGS_MODULE"] = "dailyupdates.settings"
        result = subprocess.run(
            [sys.executable, "manage.py", "check"],
            cwd=settings.BASE_DIR,
            env=env,
            capture_output=True,
            text=True,
            timeout=60,
        )
        self.assertNotEqual(result.returncode, 0)
        self.assertIn("DATABASE_URL environment variable is not set", result.stderr)
