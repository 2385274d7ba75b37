import uuid6
from django.db import migrations, models

ROLE_CHOICES = [
    ("NONE", "None"),
    ("HERDER", "Herder"),
    ("SLAUGHTERHOUSE", "Slaughterhouse"),
    ("TRANSPORTER", "Transporter"),
]


def _profile_fields():
    return [
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        (
            "id",
            models.PositiveBigIntegerField(editable=False, primary_key=True, serialize=False),
        ),
        ("principal", models.CharField(max_length=255, unique=True)),
        ("location", models.CharField(max_length=255)),
        ("registered", models.BooleanField(default=False)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ParticipantRole",
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
                ("principal", models.CharField(max_length=255, unique=True)),
                ("role", models.CharField(choices=ROLE_CHOICES, max_length=20)),
            ],
            options={
                "db_table": "participant_roles",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("role", "NONE"), _negated=True),
                        name="participant_roles_role_chosen",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Herder",
            fields=_profile_fields()
            + [
                ("total_livestock", models.PositiveIntegerField(default=0)),
                ("price_per_kg", models.PositiveIntegerField(default=0)),
                ("aimag_total_livestock", models.PositiveIntegerField(default=0)),
                ("aimag_pasture_carrying_capacity", models.PositiveIntegerField(default=0)),
                ("aimag_total_herder_number", models.PositiveIntegerField(default=0)),
            ],
            options={"db_table": "herders", "ordering": ["id"], "abstract": False},
        ),
        migrations.CreateModel(
            name="Slaughterhouse",
            fields=_profile_fields()
            + [("price_per_kg", models.PositiveIntegerField(default=0))],
            options={"db_table": "slaughterhouses", "ordering": ["id"], "abstract": False},
        ),
        migrations.CreateModel(
            name="Transporter",
            fields=_profile_fields()
            + [
                ("truck_info", models.CharField(max_length=255)),
                ("price_per_km", models.PositiveIntegerField(default=0)),
            ],
            options={"db_table": "transporters", "ordering": ["id"], "abstract": False},
        ),
    ]
