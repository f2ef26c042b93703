"""Payment options: the candidate ways of paying for a single order."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class OptionKind(str, Enum):
    """Closed set of option kinds.

    PROMOTION: the whole order paid with a promoted method.
    POINTS:    the whole order paid with loyalty points.
    COMBO:     at least the minimum share in points, the rest by card,
               for a flat discount.
    """

    PROMOTION = "promotion"
    POINTS = "points"
    COMBO = "combo"


@dataclass(frozen=True)
class PaymentOption:
    """One candidate payment for an order.

    Attributes:
        kind: Which mechanism produced the option.
        method_id: Method receiving the non-points portion. For POINTS this
            is the points method itself (and the card portion is zero).
        discount: Discount earned, in currency.
        points_used: Loyalty points consumed, in currency.
    """

    kind: OptionKind
    method_id: str
    discount: Decimal
    points_used: Decimal = Decimal(0)

    def card_amount(self, order_value: Decimal) -> Decimal:
        """Amount charged to ``method_id`` once points are taken off."""
        return order_value - self.discount - self.points_used

    def debits(self, order_value: Decimal, points_method_id: str) -> dict[str, Decimal]:
        """Budget debits needed to commit this option, keyed by method id.

        Zero amounts are dropped; when both portions land on the same
        method they are summed.
        """
        out: dict[str, Decimal] = {}
        if self.points_used > 0:
            out[points_method_id] = self.points_used
        card = self.card_amount(order_value)
        if card > 0:
            out[self.method_id] = out.get(self.method_id, Decimal(0)) + card
        return out

    def sort_key(self) -> tuple[Decimal, Decimal]:
        """Preference key: bigger discount first, then more points."""
        return (-self.discount, -self.points_used)
