"""Payment allocator: the core of the system.

An allocation run:
  1. Builds a fresh catalog from the payment methods.
  2. Ranks the orders once, by maximum possible discount.
  3. Visits orders in that fixed order. For each one it generates the
     options feasible against the *current* budgets, prefers the biggest
     discount (then the most points), and commits the first option whose
     debits all fit.
  4. Returns assignments, unpaid orders and per-method usage.

Each order ends either committed to one option or unpaid. Later orders see
the budgets left over by earlier commits.
"""

from __future__ import annotations

from typing import Iterable, Optional

from payopt.core.config import Settings
from payopt.core.logging import get_logger
from payopt.models.allocation import AllocationResult, Assignment
from payopt.models.option import PaymentOption
from payopt.schemas.order import Order
from payopt.schemas.payment_method import PaymentMethod
from payopt.services.allocation.catalog import PaymentCatalog
from payopt.services.allocation.options import OptionGenerator
from payopt.services.allocation.ranker import OrderRanker

logger = get_logger(__name__)


class PaymentAllocator:
    """Greedily assigns a payment option to each order of a batch."""

    def __init__(self, catalog: PaymentCatalog, config: Settings) -> None:
        self.catalog = catalog
        self.config = config
        self.generator = OptionGenerator(catalog, config)
        self.ranker = OrderRanker(catalog, config)

    @classmethod
    def from_methods(
        cls, methods: Iterable[PaymentMethod], config: Settings
    ) -> "PaymentAllocator":
        return cls(PaymentCatalog(methods, config.points_method_id), config)

    # ── Public API ───────────────────────────────────────────────────

    def run(self, orders: Iterable[Order]) -> AllocationResult:
        """Allocate every order and return the outcome.

        Args:
            orders: The batch. Orders are never mutated.

        Returns:
            An ``AllocationResult``; the catalog is left holding the final
            remaining budgets.
        """
        orders = list(orders)
        logger.info(
            "Allocation run started: orders=%d methods=%d",
            len(orders),
            len(self.catalog),
        )
        if self.catalog.points_method is None:
            logger.info(
                "Points method %r not in catalog; points and combo options disabled",
                self.catalog.points_method_id,
            )

        result = AllocationResult()
        committed: set[str] = set()

        try:
            for order in self.ranker.rank(orders):
                if order.id in committed:
                    logger.warning("Skipping duplicate order id %s", order.id)
                    result.skipped.append(order.id)
                    continue

                option = self.allocate(order)
                if option is None:
                    logger.warning(
                        "Order %s left unpaid: no feasible payment option", order.id
                    )
                    if order.id not in result.unpaid:
                        result.unpaid.append(order.id)
                    continue

                # an earlier copy of this id may have failed; the id is paid now
                if order.id in result.unpaid:
                    result.unpaid.remove(order.id)
                committed.add(order.id)
                result.assignments.append(Assignment(order=order, option=option))

        except Exception:
            logger.exception("Allocation run failed")
            raise

        result.usage = self.catalog.usage()
        logger.info(
            "Allocation complete: committed=%d unpaid=%d total_discount=%s",
            len(result.assignments),
            len(result.unpaid),
            result.total_discount,
        )
        return result

    def allocate(self, order: Order) -> Optional[PaymentOption]:
        """Pick and commit the best option for one order.

        Returns the committed option, or None when nothing could be
        committed (the catalog is then unchanged).
        """
        options = self.generator.generate(order)
        options.sort(key=PaymentOption.sort_key)

        for option in options:
            if self.commit(order, option):
                logger.debug(
                    "Committed order=%s kind=%s method=%s discount=%s points=%s",
                    order.id,
                    option.kind.value,
                    option.method_id,
                    option.discount,
                    option.points_used,
                )
                return option
        return None

    def commit(self, order: Order, option: PaymentOption) -> bool:
        """Debit points then card for ``option``, all-or-nothing."""
        debits = option.debits(order.value, self.catalog.points_method_id)
        return self.catalog.debit_many(debits)


def allocate_payments(
    orders: Iterable[Order],
    methods: Iterable[PaymentMethod],
    config: Settings,
) -> AllocationResult:
    """Run one allocation batch on fresh budgets."""
    return PaymentAllocator.from_methods(methods, config).run(orders)
