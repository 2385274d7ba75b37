"""Participant DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
They carry the structural validation of registration input: the Service
Layer only enforces the role and uniqueness rules.  DTOs are immutable
(``frozen=True``).
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.domain.limits import POSITIVE_INT_MAX

# Counts and prices are stored in PositiveIntegerField columns.
Count = Annotated[int, Field(ge=0, le=POSITIVE_INT_MAX)]


class _RegisterProfileDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    location: str = Field(max_length=255)

    @field_validator("location")
    @classmethod
    def location_must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Location must not be blank.")
        return v


class RegisterHerderDTO(_RegisterProfileDTO):
    total_livestock: Count = 0
    price_per_kg: Count = 0
    aimag_total_livestock: Count = 0
    aimag_pasture_carrying_capacity: Count = 0
    aimag_total_herder_number: Count = 0


class RegisterSlaughterhouseDTO(_RegisterProfileDTO):
    price_per_kg: Count = 0


class RegisterTransporterDTO(_RegisterProfileDTO):
    """``truck_info`` is a free-form description of the vehicle."""

    truck_info: str = Field(max_length=255)
    price_per_km: Count = 0

    @field_validator("truck_info")
    @classmethod
    def truck_info_must_not_be_blank(cls, v: str) -> str:
        if not v:
            raise ValueError("Truck info must not be blank.")
        return v
