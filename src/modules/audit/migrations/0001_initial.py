import django.db.models.deletion
import django.utils.timezone
import uuid6
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now, editable=False
                    ),
                ),
                (
                    "actor_role",
                    models.CharField(blank=True, default="", max_length=32),
                ),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("STATUS_CHANGE", "Status change"),
                            ("CANCEL", "Cancel"),
                        ],
                        max_length=32,
                    ),
                ),
                ("table_affected", models.CharField(max_length=64)),
                ("record_id", models.CharField(max_length=64)),
                ("description", models.TextField(blank=True, default="")),
                ("changes", models.JSONField(blank=True, default=dict)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="activity_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "activity_logs",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["table_affected", "record_id"],
                        name="activity_logs_record_idx",
                    ),
                    models.Index(
                        fields=["-created_at"], name="activity_logs_created_idx"
                    ),
                ],
            },
        ),
    ]
