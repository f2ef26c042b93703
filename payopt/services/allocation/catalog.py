"""Payment-method catalog with depleting per-method budgets.

The catalog is the only mutable state in an allocation run. It is owned
by a single allocator; every debit goes through ``debit`` or
``debit_many`` so budgets only ever decrease and never drop below zero.
A concurrent caller would have to serialize access to it.
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from payopt.core.logging import get_logger
from payopt.schemas.payment_method import PaymentMethod

logger = get_logger(__name__)


class MethodNotFoundError(LookupError):
    """Raised when a payment-method id is not in the catalog."""

    def __init__(self, method_id: str) -> None:
        super().__init__(f"Unknown payment method: {method_id!r}")
        self.method_id = method_id


class PaymentCatalog:
    """Payment methods keyed by id, plus their remaining budgets."""

    def __init__(
        self, methods: Iterable[PaymentMethod], points_method_id: str
    ) -> None:
        self._methods: dict[str, PaymentMethod] = {}
        for method in methods:
            if method.id in self._methods:
                raise ValueError(f"Duplicate payment method id: {method.id!r}")
            self._methods[method.id] = method
        self._remaining: dict[str, Decimal] = {
            m.id: m.limit for m in self._methods.values()
        }
        self.points_method_id = points_method_id

    # ── Lookups ──────────────────────────────────────────────────────

    def __contains__(self, method_id: object) -> bool:
        return method_id in self._methods

    def __len__(self) -> int:
        return len(self._methods)

    @property
    def methods(self) -> list[PaymentMethod]:
        """Methods in their original input order."""
        return list(self._methods.values())

    def get(self, method_id: str) -> PaymentMethod:
        try:
            return self._methods[method_id]
        except KeyError:
            raise MethodNotFoundError(method_id) from None

    def find(self, method_id: str) -> Optional[PaymentMethod]:
        """Like ``get`` but returns None for unknown ids."""
        return self._methods.get(method_id)

    @property
    def points_method(self) -> Optional[PaymentMethod]:
        return self._methods.get(self.points_method_id)

    def card_methods(self) -> list[PaymentMethod]:
        """Every method except loyalty points, in input order."""
        return [m for m in self._methods.values() if m.id != self.points_method_id]

    # ── Budgets ──────────────────────────────────────────────────────

    def remaining(self, method_id: str) -> Decimal:
        if method_id not in self._remaining:
            raise MethodNotFoundError(method_id)
        return self._remaining[method_id]

    def budgets(self) -> Mapping[str, Decimal]:
        """Live read-only view of remaining budgets."""
        return MappingProxyType(self._remaining)

    def snapshot(self) -> dict[str, Decimal]:
        """Point-in-time copy of remaining budgets."""
        return dict(self._remaining)

    def spent(self, method_id: str) -> Decimal:
        return self.get(method_id).limit - self._remaining[method_id]

    def usage(self) -> dict[str, Decimal]:
        """Amount debited per method, in input order."""
        return {m.id: m.limit - self._remaining[m.id] for m in self._methods.values()}

    def debit(self, method_id: str, amount: Decimal) -> bool:
        """Debit ``amount`` from one method.

        Returns False, leaving the budget untouched, when the remaining
        budget does not cover the amount.
        """
        return self.debit_many({method_id: amount})

    def debit_many(self, debits: Mapping[str, Decimal]) -> bool:
        """Apply several debits all-or-nothing.

        Every debit is checked before any is applied, so a failure never
        leaves a partial change behind.
        """
        for method_id, amount in debits.items():
            if amount < 0:
                raise ValueError(
                    f"Debit amount must be non-negative, got {amount} for {method_id!r}"
                )
            if self.remaining(method_id) < amount:
                logger.debug(
                    "Debit rejected: method=%s amount=%s remaining=%s",
                    method_id,
                    amount,
                    self._remaining[method_id],
                )
                return False

        for method_id, amount in debits.items():
            self._remaining[method_id] -= amount
        return True
