import uuid

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Update",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("employee_name", models.CharField(max_length=255)),
                ("date", models.DateField(db_index=True)),
                ("updates", models.TextField()),
                ("github_issue_link", models.URLField(blank=True, default="", max_length=500)),
                ("issue_description", models.TextField(blank=True, default="")),
                ("build_number", models.CharField(blank=True, default="", max_length=100)),
                (
                    "issue_status",
                    models.CharField(
                        choices=[("N/A", "N/A"), ("Opened", "Opened"), ("Closed", "Closed")],
                        default="N/A",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
            },
        ),
    ]
