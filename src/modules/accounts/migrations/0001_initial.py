import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="EmployeeProfile",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("Admin", "Admin"),
                            ("InventoryManager", "Inventory Manager"),
                            ("TransactionManager", "Transaction Manager"),
                            ("UserManager", "User Manager"),
                            ("OrderSupport", "Order Support"),
                        ],
                        max_length=32,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="employee_profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "employee_profiles",
                "indexes": [
                    models.Index(fields=["role"], name="employee_profiles_role_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="UserPermission",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "permission_name",
                    models.CharField(
                        choices=[
                            ("orders_orders_pending", "Orders: pending"),
                            ("orders_orders_processing", "Orders: processing"),
                            ("orders_orders_shipping", "Orders: shipping"),
                            ("orders_orders_delivery", "Orders: delivery"),
                            ("orders_orders_received", "Orders: received"),
                            ("orders_orders_completed", "Orders: completed"),
                            ("orders_orders_cancelled", "Orders: cancelled"),
                            ("logs", "Activity logs"),
                        ],
                        max_length=64,
                    ),
                ),
                ("can_access", models.BooleanField(default=False)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="permission_overrides",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "user_permissions",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "permission_name"),
                        name="user_permissions_user_key_unique",
                    )
                ],
            },
        ),
    ]
