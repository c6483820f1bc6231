from datetime import date

from django.test import TestCase
from django.urls import reverse

from updates.models import Update


class DashboardViewTests(TestCase):
    def setUp(self):
        self.alice = Update.objects.create(
            employee_name="Alice",
            date=date(2024, 5, 2),
            updates="- Fixed login bug\n- Reviewed PR",
            github_issue_link="https://github.com/acme/app/issues/7",
            build_number="512",
        )
        self.bob = Update.objects.create(
            employee_name="Bob",
            date=date(2024, 5, 1),
            updates="Wrote docs",
        )

    def test_dashboard_lists_updates_newest_first(self):
        response = self.client.get(reverse("dashboard:index"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(response.context["entries"]), [self.alice, self.bob])
        self.assertContains(response, "<li>Fixed login bug</li>", html=True)
        self.assertContains(response, "Build: 512")
        self.assertContains(response, "May 02, 2024")

    def test_dashboard_filters_by_employee_and_range(self):
        response = self.client.get(reverse("dashboard:index"), {"employee": "bo"})
        self.assertEqual(list(response.context["entries"]), [self.bob])

        response = self.client.get(reverse("dashboard:index"), {"start": "2024-05-02"})
        self.assertEqual(list(response.context["entries"]), [self.alice])

    def test_dashboard_shows_empty_state(self):
        response = self.client.get(reverse("dashboard:index"), {"employee": "nobody"})
        self.assertContains(response, "No updates found")

    def test_add_update(self):
        payload = {
            "employee_name": "Carol",
            "date": "2024-05-03",
            "updates": "  First thing\n\nSecond thing  ",
            "github_issue_link": "",
            "issue_description": "",
            "build_number": "",
            "issue_status": "N/A",
        }
        response = self.client.post(reverse("dashboard:add"), payload)
        self.assertRedirects(response, reverse("dashboard:index"))
        entry = Update.objects.get(employee_name="Carol")
        self.assertEqual(entry.updates, "First thing\nSecond thing")

    def test_add_update_requires_at_least_one_line(self):
        payload = {"employee_name": "Carol", "date": "2024-05-03", "updates": "   ", "issue_status": "N/A"}
        response = self.client.post(reverse("dashboard:add"), payload)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(Update.objects.filter(employee_name="Carol").exists())

    def test_edit_update(self):
        url = reverse("dashboard:edit", args=[self.bob.pk])
        response = self.client.get(url)
        self.assertContains(response, "Edit Update")
        self.assertContains(response, "Wrote docs")

        payload = {
            "employee_name": "Bob",
            "date": "2024-05-01",
            "updates": "Wrote more docs",
            "issue_status": "Opened",
        }
        response = self.client.post(url, payload)
        self.assertRedirects(response, reverse("dashboard:index"))
        self.bob.refresh_from_db()
        self.assertEqual(self.bob.updates, "Wrote more docs")
        self.assertEqual(self.bob.issue_status, "Opened")

    def test_edit_unknown_update_returns_404(self):
        response = self.client.get(reverse("dashboard:edit", args=["missing"]))
        self.assertEqual(response.status_code, 404)

    def test_delete_requires_post(self):
        url = reverse("dashboard:delete", args=[self.bob.pk])
        self.assertEqual(self.client.get(url).status_code, 405)

        response = self.client.post(url)
        self.assertRedirects(response, reverse("dashboard:index"))
        self.assertFalse(Update.objects.filter(pk=self.bob.pk).exists())

    def test_invalid_range_keeps_employee_filter(self):
        response = self.client.get(
            reverse("dashboard:index"),
            {"employee": "bob", "start": "2024-05-05", "end": "2024-05-01"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(response.context["entries"]), [self.bob])
        self.assertContains(response, "Start date must be on or before end date.")

    def test_bad_date_keeps_other_filters(self):
        response = self.client.get(reverse("dashboard:index"), {"employee": "ali", "start": "soon"})
        self.assertEqual(list(response.context["entries"]), [self.alice])

    def test_issue_link_without_scheme_assumes_https(self):
        payload = {
            "employee_name": "Dana",
            "date": "2024-05-04",
            "updates": "Triaged bugs",
            "github_issue_link": "github.com/acme/app/issues/9",
            "issue_status": "N/A",
        }
        response = self.client.post(reverse("dashboard:add"), payload)
        self.assertRedirects(response, reverse("dashboard:index"))
        entry = Update.objects.get(employee_name="Dana")
        self.assertEqual(entry.github_issue_link, "https://github.com/acme/app/issues/9")
