import django.db.models.deletion
import uuid6
from django.db import migrations, models

STATUS_CHOICES = [
    ("PLACED", "Placed"),
    ("CONFIRMED", "Confirmed"),
    ("REJECTED", "Rejected"),
    ("IN_TRANSIT", "In transit"),
    ("COMPLETED", "Completed"),
]

PHASE_CHOICES = [
    ("ASSIGNED", "Transporter assigned"),
    ("ACCEPTED", "Transporter accepted"),
    ("PICKED_UP", "Picked up"),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("participants", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.PositiveBigIntegerField(
                        editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("buyer", models.CharField(max_length=255)),
                ("quantity", models.PositiveIntegerField()),
                (
                    "status",
                    models.CharField(choices=STATUS_CHOICES, default="PLACED", max_length=20),
                ),
                (
                    "transit_phase",
                    models.CharField(blank=True, choices=PHASE_CHOICES, default="", max_length=20),
                ),
                ("distance", models.PositiveIntegerField(blank=True, null=True)),
                ("picked_up_quantity", models.PositiveIntegerField(blank=True, null=True)),
                ("ear_tags", models.JSONField(blank=True, default=list)),
                (
                    "herder",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="participants.herder",
                    ),
                ),
                (
                    "transporter",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to="participants.transporter",
                    ),
                ),
            ],
            options={
                "db_table": "orders",
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["status"], name="orders_status_idx"),
                    models.Index(fields=["buyer"], name="orders_buyer_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gte", 1)),
                        name="orders_quantity_positive",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderStatusHistory",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "id",
                    models.UUIDField(
                        default=uuid6.uuid7,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("actor", models.CharField(max_length=255)),
                (
                    "old_status",
                    models.CharField(blank=True, choices=STATUS_CHOICES, max_length=20, null=True),
                ),
                ("new_status", models.CharField(choices=STATUS_CHOICES, max_length=20)),
                (
                    "old_phase",
                    models.CharField(blank=True, choices=PHASE_CHOICES, default="", max_length=20),
                ),
                (
                    "new_phase",
                    models.CharField(blank=True, choices=PHASE_CHOICES, default="", max_length=20),
                ),
                ("notes", models.TextField(blank=True, default="")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="status_history",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "db_table": "order_status_history",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["order", "created_at"], name="osh_order_created_idx"),
                ],
            },
        ),
    ]
