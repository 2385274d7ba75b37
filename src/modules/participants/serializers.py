"""Participant DRF serializers for API input/output.

Registration input is validated by the Pydantic DTOs in ``dtos.py``;
these serializers render the registry and validate the role choice.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.participants.constants import Role
from modules.participants.models import Herder, Slaughterhouse, Transporter

_PROFILE_FIELDS = ["id", "principal", "location", "registered", "created_at", "updated_at"]


class ChooseRoleSerializer(serializers.Serializer):
    role = serializers.CharField()


class RoleSerializer(serializers.Serializer):
    principal = serializers.CharField()
    role = serializers.ChoiceField(choices=Role.choices)


class ProfileIdSerializer(serializers.Serializer):
    """Principal-to-id look-up result."""

    principal = serializers.CharField()
    id = serializers.IntegerField()


class HerderSerializer(serializers.ModelSerializer):
    class Meta:
        model = Herder
        fields = _PROFILE_FIELDS + [
            "total_livestock",
            "price_per_kg",
            "aimag_total_livestock",
            "aimag_pasture_carrying_capacity",
            "aimag_total_herder_number",
        ]
        read_only_fields = fields


class SlaughterhouseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Slaughterhouse
        fields = _PROFILE_FIELDS + ["price_per_kg"]
        read_only_fields = fields


class TransporterSerializer(serializers.ModelSerializer):
    class Meta:
        model = Transporter
        fields = _PROFILE_FIELDS + ["truck_info", "price_per_km"]
        read_only_fields = fields
