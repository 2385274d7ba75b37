"""Participant API views.

Exposes the ``ParticipantService`` via HTTP using DRF ViewSets.  The acting
principal is always ``request.user.username``; domain exceptions propagate
to ``modules.core.exceptions.api_exception_handler``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Dict, Type

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from pydantic import BaseModel as PydanticModel
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.participants.dtos import (
    RegisterHerderDTO,
    RegisterSlaughterhouseDTO,
    RegisterTransporterDTO,
)
from modules.participants.filters import (
    HerderFilter,
    SlaughterhouseFilter,
    TransporterFilter,
)
from modules.participants.models import Herder, Slaughterhouse, Transporter
from modules.participants.repositories.django_repository import (
    ParticipantDjangoRepository,
)
from modules.participants.serializers import (
    ChooseRoleSerializer,
    HerderSerializer,
    ProfileIdSerializer,
    RoleSerializer,
    SlaughterhouseSerializer,
    TransporterSerializer,
)
from modules.participants.services import ParticipantService

PRINCIPAL_PATTERN = r"[^/]+"


def _payload(request: Request) -> Dict[str, Any]:
    """The request body as a plain dict; a non-object body is a validation error."""
    data = request.data
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object.", code="invalid")
    return data.dict() if hasattr(data, "dict") else dict(data)


class RoleViewSet(GenericViewSet):
    """Role choice of the calling principal and role look-up of any principal."""

    serializer_class = RoleSerializer
    lookup_field = "principal"
    lookup_value_regex = PRINCIPAL_PATTERN

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ParticipantService(repository=ParticipantDjangoRepository())

    @extend_schema(request=ChooseRoleSerializer, responses={201: RoleSerializer})
    def create(self, request: Request) -> Response:
        """POST /api/v1/roles/"""
        serializer = ChooseRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assignment = self._service.choose_role(
            request.user.get_username(), serializer.validated_data["role"]
        )
        out = RoleSerializer({"principal": assignment.principal, "role": assignment.role})
        return Response(out.data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, principal: str | None = None) -> Response:
        """GET /api/v1/roles/{principal}/"""
        role = self._service.get_role(principal)
        return Response(RoleSerializer({"principal": principal, "role": role}).data)


class _ProfileViewSet(GenericViewSet):
    """Register, list, retrieve and principal look-up for one profile kind.

    Subclasses name the DTO and the ``ParticipantService`` methods that
    handle their kind.
    """

    pagination_class = StandardResultsSetPagination
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    ordering_fields = ["id", "created_at"]
    ordering = ["id"]

    dto_class: Type[PydanticModel]
    register_method: str
    get_method: str
    id_for_method: str

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ParticipantService(repository=ParticipantDjangoRepository())

    def _call(self, method: str) -> Callable[..., Any]:
        return getattr(self._service, method)

    def create(self, request: Request) -> Response:
        dto = self.dto_class.model_validate(_payload(request))
        profile = self._call(self.register_method)(request.user.get_username(), dto)
        out = self.get_serializer(profile)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def list(self, request: Request) -> Response:
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        profile = self._call(self.get_method)(pk)
        return Response(self.get_serializer(profile).data)

    @extend_schema(responses={200: ProfileIdSerializer})
    @action(
        detail=False,
        methods=["get"],
        url_path=f"by-principal/(?P<principal>{PRINCIPAL_PATTERN})",
    )
    def by_principal(self, request: Request, principal: str | None = None) -> Response:
        profile_id = self._call(self.id_for_method)(principal)
        return Response(ProfileIdSerializer({"principal": principal, "id": profile_id}).data)


class HerderViewSet(_ProfileViewSet):
    """GET/POST /api/v1/herders/"""

    queryset = Herder.objects.all()
    serializer_class = HerderSerializer
    filterset_class = HerderFilter
    ordering_fields = ["id", "created_at", "total_livestock", "price_per_kg"]
    dto_class = RegisterHerderDTO
    register_method = "register_herder"
    get_method = "get_herder"
    id_for_method = "herder_id_for"


class SlaughterhouseViewSet(_ProfileViewSet):
    """GET/POST /api/v1/slaughterhouses/"""

    queryset = Slaughterhouse.objects.all()
    serializer_class = SlaughterhouseSerializer
    filterset_class = SlaughterhouseFilter
    dto_class = RegisterSlaughterhouseDTO
    register_method = "register_slaughterhouse"
    get_method = "get_slaughterhouse"
    id_for_method = "slaughterhouse_id_for"


class TransporterViewSet(_ProfileViewSet):
    """GET/POST /api/v1/transporters/"""

    queryset = Transporter.objects.all()
    serializer_class = TransporterSerializer
    filterset_class = TransporterFilter
    dto_class = RegisterTransporterDTO
    register_method = "register_transporter"
    get_method = "get_transporter"
    id_for_method = "transporter_id_for"
