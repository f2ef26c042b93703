"""Candidate payment options for a single order.

Three mechanisms can pay for an order:

* promotion - the full order on a method the order lists as a promotion,
  at that method's discount;
* points    - the full order in loyalty points, at the points discount;
* combo     - at least ``combo_min_points_percent`` of the value in points
  and the rest on a card, at a flat ``combo_discount_percent`` discount.

Discounts from different mechanisms never stack. Every candidate returned
is feasible against the budgets it was generated from; the allocator
re-checks at commit time.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Mapping, Optional

from payopt.core.config import Settings
from payopt.models.option import OptionKind, PaymentOption
from payopt.schemas.order import Order
from payopt.services.allocation.catalog import PaymentCatalog

HUNDRED = Decimal(100)


def percent_of(value: Decimal, percent: int) -> Decimal:
    """``percent`` percent of ``value``, exact."""
    return value * Decimal(percent) / HUNDRED


class OptionGenerator:
    """Builds the feasible payment options for an order."""

    def __init__(self, catalog: PaymentCatalog, config: Settings) -> None:
        self.catalog = catalog
        self.config = config

    def generate(
        self,
        order: Order,
        budgets: Optional[Mapping[str, Decimal]] = None,
    ) -> List[PaymentOption]:
        """Return every feasible option for ``order``.

        Args:
            order: The order to pay for.
            budgets: Remaining budget per method id. Defaults to the
                catalog's live budgets.

        Returns:
            Promotion options in the order's listed order, then the points
            option, then the combo option. May be empty.
        """
        if budgets is None:
            budgets = self.catalog.budgets()

        options = self.promotion_options(order, budgets)
        points = self.points_option(order, budgets)
        if points is not None:
            options.append(points)
        combo = self.combo_option(order, budgets)
        if combo is not None:
            options.append(combo)
        return options

    def promotion_options(
        self, order: Order, budgets: Mapping[str, Decimal]
    ) -> List[PaymentOption]:
        options: List[PaymentOption] = []
        for promo_id in order.promotions or []:
            method = self.catalog.find(promo_id)
            if method is None:
                continue
            discount = percent_of(order.value, method.discount)
            if budgets[method.id] >= order.value - discount:
                options.append(
                    PaymentOption(OptionKind.PROMOTION, method.id, discount)
                )
        return options

    def points_option(
        self, order: Order, budgets: Mapping[str, Decimal]
    ) -> Optional[PaymentOption]:
        points = self.catalog.points_method
        if points is None:
            return None
        discount = percent_of(order.value, points.discount)
        needed = order.value - discount
        if budgets[points.id] < needed:
            return None
        return PaymentOption(OptionKind.POINTS, points.id, discount, needed)

    def combo_option(
        self, order: Order, budgets: Mapping[str, Decimal]
    ) -> Optional[PaymentOption]:
        points = self.catalog.points_method
        if points is None:
            return None

        min_points = percent_of(order.value, self.config.combo_min_points_percent)
        available = budgets[points.id]
        if available < min_points:
            return None

        discount = percent_of(order.value, self.config.combo_discount_percent)
        payable = order.value - discount
        # as many points as available, capped at the payable amount,
        # never under the minimum share
        points_used = max(min(payable, available), min_points)
        remainder = payable - points_used

        card = self._best_card(remainder, budgets)
        if card is None:
            return None
        return PaymentOption(OptionKind.COMBO, card, discount, points_used)

    def _best_card(
        self, amount: Decimal, budgets: Mapping[str, Decimal]
    ) -> Optional[str]:
        """Highest-discount card that can cover ``amount``; ties by id."""
        eligible = [
            m for m in self.catalog.card_methods() if budgets[m.id] >= amount
        ]
        if not eligible:
            return None
        best = min(eligible, key=lambda m: (-m.discount, m.id))
        return best.id
