"""Pydantic schemas for allocation requests and responses."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from payopt.schemas.order import Order
from payopt.schemas.payment_method import PaymentMethod


class AllocationRequest(BaseModel):
    """Request body carrying both datasets for a single batch run."""

    orders: list[Order] = Field(default_factory=list)
    payment_methods: list[PaymentMethod] = Field(default_factory=list)


class MethodUsage(BaseModel):
    """Amount spent through one payment method."""

    method_id: str
    amount: Decimal


class AssignmentResponse(BaseModel):
    """One committed order and how it was paid."""

    order_id: str
    kind: str = Field(..., description="promotion | points | combo")
    method_id: str = Field(
        ...,
        description="Method that received the non-points portion",
    )
    discount: Decimal
    points_used: Decimal
    card_amount: Decimal


class AllocationResponse(BaseModel):
    """Result of an allocation run."""

    usage: list[MethodUsage] = Field(
        default_factory=list,
        description="Amount spent per method, input order, only amounts > 0",
    )
    assignments: list[AssignmentResponse] = Field(
        default_factory=list,
        description="Committed orders in processing order",
    )
    unpaid_orders: list[str] = Field(
        default_factory=list,
        description="Orders left without any feasible payment option",
    )
    skipped_orders: list[str] = Field(
        default_factory=list,
        description="Duplicate order ids skipped after an earlier commit",
    )
    total_discount: Decimal = Decimal("0.00")
