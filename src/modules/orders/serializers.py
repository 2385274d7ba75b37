"""Order DRF serializers for API input/output.

Input serializers only check the shape of a request.  Range and
lifecycle rules (positive quantities, distinct ear tags, who may act)
live in ``OrderService`` so the HTTP and service surfaces report the same
errors.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class PlaceOrderSerializer(serializers.Serializer):
    herder_id = serializers.IntegerField()
    quantity = serializers.IntegerField()


class ConfirmOrderSerializer(serializers.Serializer):
    accept = serializers.BooleanField(required=False, default=True)


class RequestTransportationSerializer(serializers.Serializer):
    transporter = serializers.CharField(help_text="Principal of the transporter.")
    distance = serializers.IntegerField()


class ConfirmPickUpSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()


class ConfirmDeliverySerializer(serializers.Serializer):
    ear_tags = serializers.ListField(child=serializers.IntegerField(), allow_empty=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "actor",
            "old_status",
            "new_status",
            "old_phase",
            "new_phase",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders.

    Profiles are exposed by id, plus the transporter's principal so a
    buyer can see who was assigned.
    """

    herder_id = serializers.IntegerField(read_only=True)
    transporter_id = serializers.IntegerField(read_only=True, allow_null=True)
    transporter_principal = serializers.CharField(
        source="transporter.principal", read_only=True, default=None
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "herder_id",
            "buyer",
            "quantity",
            "status",
            "transit_phase",
            "transporter_id",
            "transporter_principal",
            "distance",
            "picked_up_quantity",
            "ear_tags",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
