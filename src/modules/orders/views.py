"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ViewSet.  The acting
principal is always ``request.user.username``.  Domain exceptions
propagate to ``modules.core.exceptions.api_exception_handler``, which
renders them by error kind.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    ConfirmDeliverySerializer,
    ConfirmOrderSerializer,
    ConfirmPickUpSerializer,
    OrderSerializer,
    PlaceOrderSerializer,
    RequestTransportationSerializer,
    StatusHistorySerializer,
)
from modules.orders.services import OrderService
from modules.participants.repositories.django_repository import (
    ParticipantDjangoRepository,
)


class OrderViewSet(GenericViewSet):
    """ViewSet for the order lifecycle.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: every write goes through the
    service layer.
    """

    queryset = Order.objects.select_related("herder", "transporter")
    serializer_class = OrderSerializer
    pagination_class = StandardResultsSetPagination
    filterset_class = OrderFilter
    ordering_fields = ["id", "created_at", "quantity", "status"]
    ordering = ["id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            participant_repository=ParticipantDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Per-action throttling scopes."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_placement"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    @property
    def principal(self) -> str:
        return self.request.user.get_username()

    # ------------------------------------------------------------------
    # Place / List / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(request=PlaceOrderSerializer, responses={201: OrderSerializer})
    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.place_order(
            self.principal,
            herder_id=serializer.validated_data["herder_id"],
            quantity=serializer.validated_data["quantity"],
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, phase, buyer, herder, transporter, date range)
        is handled by ``OrderFilter``.  Results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk)
        return Response(OrderSerializer(order).data)

    @extend_schema(responses={200: {"type": "object", "properties": {"next_id": {"type": "integer"}}}})
    @action(detail=False, methods=["get"], url_path="next-id")
    def next_id(self, request: Request) -> Response:
        """GET /api/v1/orders/next-id/"""
        return Response({"next_id": self._service.next_order_id()})

    @extend_schema(responses={200: StatusHistorySerializer(many=True)})
    @action(detail=True, methods=["get"])
    def history(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/history/"""
        records = self._service.get_history(pk)
        return Response(StatusHistorySerializer(records, many=True).data)

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    @extend_schema(request=ConfirmOrderSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"])
    def confirm(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/confirm/  (herder accepts or rejects)"""
        serializer = ConfirmOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.confirm_order(
            pk, self.principal, accept=serializer.validated_data["accept"]
        )
        return Response(OrderSerializer(order).data)

    @extend_schema(
        request=RequestTransportationSerializer, responses={200: OrderSerializer}
    )
    @action(detail=True, methods=["post"], url_path="request-transportation")
    def request_transportation(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/request-transportation/  (buyer)"""
        serializer = RequestTransportationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.request_transportation(
            pk,
            self.principal,
            transporter_principal=serializer.validated_data["transporter"],
            distance=serializer.validated_data["distance"],
        )
        return Response(OrderSerializer(order).data)

    @extend_schema(request=None, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="confirm-transportation")
    def confirm_transportation(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/confirm-transportation/  (transporter)"""
        order = self._service.confirm_transportation_request(pk, self.principal)
        return Response(OrderSerializer(order).data)

    @extend_schema(request=ConfirmPickUpSerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="confirm-pickup")
    def confirm_pickup(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/confirm-pickup/  (transporter)"""
        serializer = ConfirmPickUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.confirm_pick_up(
            pk, self.principal, quantity=serializer.validated_data["quantity"]
        )
        return Response(OrderSerializer(order).data)

    @extend_schema(request=ConfirmDeliverySerializer, responses={200: OrderSerializer})
    @action(detail=True, methods=["post"], url_path="confirm-delivery")
    def confirm_delivery(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/confirm-delivery/  (buyer)"""
        serializer = ConfirmDeliverySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.confirm_delivery(
            pk, self.principal, ear_tags=serializer.validated_data["ear_tags"]
        )
        return Response(OrderSerializer(order).data)
