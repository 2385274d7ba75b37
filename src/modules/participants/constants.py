"""Participant registry constants.

Roles a principal may choose and the names of the id sequences used for
each profile kind.  Each kind has its own counter, starting at 1.
"""

from django.db import models


class Role(models.TextChoices):
    NONE = "NONE", "None"
    HERDER = "HERDER", "Herder"
    SLAUGHTERHOUSE = "SLAUGHTERHOUSE", "Slaughterhouse"
    TRANSPORTER = "TRANSPORTER", "Transporter"


CHOOSABLE_ROLES: set[str] = {Role.HERDER, Role.SLAUGHTERHOUSE, Role.TRANSPORTER}

HERDER_SEQUENCE = "herder"
SLAUGHTERHOUSE_SEQUENCE = "slaughterhouse"
TRANSPORTER_SEQUENCE = "transporter"

PROFILE_FIRST_ID = 1

PRINCIPAL_MAX_LENGTH = 255
