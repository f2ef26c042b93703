"""Order prioritisation.

Orders are processed in descending order of the best discount they could
possibly earn. The score ignores budgets entirely, so it is an upper bound
on what an order can actually get, not a feasibility check.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List

from payopt.core.config import Settings
from payopt.schemas.order import Order
from payopt.services.allocation.catalog import PaymentCatalog
from payopt.services.allocation.options import percent_of


class OrderRanker:
    """Sorts a batch of orders by maximum achievable discount."""

    def __init__(self, catalog: PaymentCatalog, config: Settings) -> None:
        self.catalog = catalog
        self.config = config

    def max_discount(self, order: Order) -> Decimal:
        """Largest discount any single mechanism could give ``order``."""
        # the combo discount is flat, so it always counts
        best = percent_of(order.value, self.config.combo_discount_percent)

        points = self.catalog.points_method
        if points is not None:
            best = max(best, percent_of(order.value, points.discount))

        for promo_id in order.promotions or []:
            method = self.catalog.find(promo_id)
            if method is not None:
                best = max(best, percent_of(order.value, method.discount))

        return best

    def rank(self, orders: Iterable[Order]) -> List[Order]:
        """Score descending, then id ascending; input order breaks what's left."""
        scored = [(self.max_discount(o), o) for o in orders]
        scored.sort(key=lambda pair: (-pair[0], pair[1].id))
        return [o for _, o in scored]
