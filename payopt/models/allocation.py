"""Allocation outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from payopt.models.option import PaymentOption
from payopt.schemas.order import Order


@dataclass(frozen=True)
class Assignment:
    """An order committed to exactly one payment option."""

    order: Order
    option: PaymentOption

    @property
    def order_id(self) -> str:
        return self.order.id

    @property
    def card_amount(self) -> Decimal:
        return self.option.card_amount(self.order.value)


@dataclass
class AllocationResult:
    """Container for a finished allocation run.

    Attributes:
        assignments: Committed orders, in processing order.
        unpaid: Ids with no committed order, each listed once, in processing
            order. An id drops out if a later duplicate of it commits.
        skipped: Ids of duplicate orders skipped because an order with the
            same id had already been committed.
        usage: Amount spent per payment method, in input order. Methods
            that were never charged are included with zero.
    """

    assignments: List[Assignment] = field(default_factory=list)
    unpaid: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    usage: dict[str, Decimal] = field(default_factory=dict)

    @property
    def total_discount(self) -> Decimal:
        return sum((a.option.discount for a in self.assignments), Decimal(0))

    def assignment_for(self, order_id: str) -> Assignment | None:
        for a in self.assignments:
            if a.order_id == order_id:
                return a
        return None
