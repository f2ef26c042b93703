"""Pydantic schemas for payment methods."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentMethod(BaseModel):
    """A funding source with a discount rate and a spending limit.

    ``limit`` is fixed at load time; the remaining budget lives in the
    allocation catalog.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, max_length=100)
    discount: int = Field(
        ...,
        ge=0,
        le=100,
        description="Percent discount applied to a full-order payment",
    )
    limit: Decimal = Field(..., ge=0)

    @field_validator("limit", mode="before")
    @classmethod
    def _exact_decimal(cls, v):
        if isinstance(v, float):
            return str(v)
        return v
