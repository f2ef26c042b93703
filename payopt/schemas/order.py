"""Pydantic schemas for orders."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Order(BaseModel):
    """A purchase request with a monetary value and eligible promotions.

    ``promotions`` holds payment-method ids that grant a full-order
    discount on this order. Ids that do not resolve to a known method are
    ignored during allocation.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, max_length=100)
    value: Decimal = Field(..., ge=0)
    promotions: Optional[list[str]] = Field(
        None,
        description="Payment-method ids eligible for a promotion on this order",
    )

    @field_validator("value", mode="before")
    @classmethod
    def _exact_decimal(cls, v):
        # floats go through str() so 100.1 stays 100.1, not 100.0999...
        if isinstance(v, float):
            return str(v)
        return v
