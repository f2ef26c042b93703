"""Per-method spending report.

Turns an ``AllocationResult`` into the text lines printed by the CLI and
the structured summary returned by the API. Only methods that were
actually charged are reported, in the original input order.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from payopt.models.allocation import AllocationResult
from payopt.schemas.allocation import (
    AllocationResponse,
    AssignmentResponse,
    MethodUsage,
)

CENT = Decimal("0.01")


def to_money(amount: Decimal) -> Decimal:
    """Round to two decimal places, half up."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


class UsageReporter:
    """Formats allocation results."""

    def usage(self, result: AllocationResult) -> list[tuple[str, Decimal]]:
        """(method id, amount spent) for every method with spend > 0."""
        return [
            (method_id, to_money(amount))
            for method_id, amount in result.usage.items()
            if amount > 0
        ]

    def lines(self, result: AllocationResult) -> list[str]:
        """One ``<method-id> <amount>`` line per charged method."""
        return [f"{method_id} {amount}" for method_id, amount in self.usage(result)]

    def render(self, result: AllocationResult) -> str:
        return "".join(f"{line}\n" for line in self.lines(result))

    def summary(self, result: AllocationResult) -> AllocationResponse:
        """Structured view of the run for the API."""
        return AllocationResponse(
            usage=[
                MethodUsage(method_id=method_id, amount=amount)
                for method_id, amount in self.usage(result)
            ],
            assignments=[
                AssignmentResponse(
                    order_id=a.order_id,
                    kind=a.option.kind.value,
                    method_id=a.option.method_id,
                    discount=to_money(a.option.discount),
                    points_used=to_money(a.option.points_used),
                    card_amount=to_money(a.card_amount),
                )
                for a in result.assignments
            ],
            unpaid_orders=list(result.unpaid),
            skipped_orders=list(result.skipped),
            total_discount=to_money(result.total_discount),
        )
