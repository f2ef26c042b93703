"""Tests for the greedy payment allocator.

Covers the sample batch end to end, commit atomicity and fallback,
unpaid and duplicate orders, and the run-wide properties every
allocation must satisfy.
"""

from __future__ import annotations

import random
from decimal import Decimal

import pytest

from payopt.core.config import Settings
from payopt.models.option import OptionKind, PaymentOption
from payopt.schemas.order import Order
from payopt.schemas.payment_method import PaymentMethod
from payopt.services.allocation.allocator import PaymentAllocator, allocate_payments
from payopt.services.allocation.catalog import PaymentCatalog
from payopt.services.allocation.ranker import OrderRanker
from payopt.services.allocation.reporter import UsageReporter


@pytest.fixture
def allocator(catalog: PaymentCatalog, config: Settings) -> PaymentAllocator:
    return PaymentAllocator(catalog, config)


# ── Test: sample batch ───────────────────────────────────────────────


class TestSampleBatch:
    """End-to-end runs over the sample orders and methods."""

    def test_assignments(
        self, allocator: PaymentAllocator, orders: list[Order]
    ) -> None:
        """Each payable order gets the expected option, in ranked order."""
        result = allocator.run(orders)

        assert [a.order_id for a in result.assignments] == [
            "ORDER2",
            "ORDER3",
            "ORDER1",
        ]

        order2 = result.assignment_for("ORDER2")
        assert order2.option.kind is OptionKind.COMBO
        assert order2.option.method_id == "mZysk"
        assert order2.option.points_used == Decimal("100.00")
        assert order2.card_amount == Decimal("80")

        order3 = result.assignment_for("ORDER3")
        assert order3.option.kind is OptionKind.PROMOTION
        assert order3.option.method_id == "BosBankrut"
        assert order3.card_amount == Decimal("142.5")

        order1 = result.assignment_for("ORDER1")
        assert order1.option.kind is OptionKind.PROMOTION
        assert order1.option.method_id == "mZysk"

    def test_unpaid_order_is_reported(
        self, allocator: PaymentAllocator, orders: list[Order]
    ) -> None:
        """ORDER4 has no promotions and the points are gone -> unpaid."""
        result = allocator.run(orders)
        assert result.unpaid == ["ORDER4"]
        assert result.assignment_for("ORDER4") is None

    def test_usage_and_total_discount(
        self, allocator: PaymentAllocator, orders: list[Order]
    ) -> None:
        """Usage covers every method in input order."""
        result = allocator.run(orders)
        assert result.usage == {
            "PUNKTY": Decimal("100.00"),
            "mZysk": Decimal("170.00"),
            "BosBankrut": Decimal("142.50"),
        }
        assert result.total_discount == Decimal("37.5")

    def test_two_order_batch(
        self, methods: list[PaymentMethod], orders: list[Order], config: Settings
    ) -> None:
        """ORDER2 ranks first (30.00 via points) but points alone cannot
        cover its 170.00; the points+card combo earns 20.00 and beats the
        BosBankrut promotion (10.00). ORDER1 then takes its mZysk promotion.
        """
        result = allocate_payments(orders[:2], methods, config)

        assert result.assignment_for("ORDER2").option.kind is OptionKind.COMBO
        assert result.assignment_for("ORDER1").option.kind is OptionKind.PROMOTION
        assert UsageReporter().lines(result) == ["PUNKTY 100.00", "mZysk 170.00"]

    def test_orders_not_mutated(
        self, allocator: PaymentAllocator, orders: list[Order]
    ) -> None:
        """Orders are read-only input."""
        before = [o.model_dump() for o in orders]
        allocator.run(orders)
        assert [o.model_dump() for o in orders] == before


# ── Test: selection and commit ───────────────────────────────────────


class TestSelection:
    """Tests for option preference and the commit step."""

    def test_prefers_higher_discount(self, allocator: PaymentAllocator) -> None:
        """Points 15% beats promotion 10% and combo 10%."""
        order = Order(id="X", value=Decimal("100.00"), promotions=["mZysk"])
        option = allocator.allocate(order)
        assert option.kind is OptionKind.POINTS
        assert allocator.catalog.remaining("PUNKTY") == Decimal("15.00")

    def test_equal_discount_prefers_more_points(self, config: Settings) -> None:
        """Promotion and combo both give 10.00; combo uses 90.00 in points."""
        methods = [
            PaymentMethod(id="PUNKTY", discount=0, limit=Decimal("1000")),
            PaymentMethod(id="Card", discount=10, limit=Decimal("1000")),
        ]
        allocator = PaymentAllocator.from_methods(methods, config)
        order = Order(id="X", value=Decimal("100"), promotions=["Card"])
        option = allocator.allocate(order)
        assert option.kind is OptionKind.COMBO
        assert option.points_used == Decimal("90")
        assert allocator.catalog.remaining("Card") == Decimal("1000")

    def test_commit_infeasible_leaves_budgets(
        self, allocator: PaymentAllocator
    ) -> None:
        """Points fit (60 <= 100) but the card does not (390 > 180)."""
        order = Order(id="X", value=Decimal("500.00"))
        option = PaymentOption(OptionKind.COMBO, "mZysk", Decimal("50"), Decimal("60"))
        assert allocator.commit(order, option) is False
        assert allocator.catalog.snapshot() == {
            "PUNKTY": Decimal("100.00"),
            "mZysk": Decimal("180.00"),
            "BosBankrut": Decimal("200.00"),
        }

    def test_falls_through_to_next_candidate(
        self, allocator: PaymentAllocator, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A candidate that no longer fits is skipped for the next one."""
        order = Order(id="X", value=Decimal("100.00"))
        stale = PaymentOption(OptionKind.PROMOTION, "mZysk", Decimal("50"))
        allocator.catalog.debit_many({"mZysk": Decimal("180.00")})
        fallback = PaymentOption(OptionKind.PROMOTION, "BosBankrut", Decimal("5"))
        monkeypatch.setattr(
            allocator.generator, "generate", lambda o, budgets=None: [fallback, stale]
        )

        option = allocator.allocate(order)

        assert option == fallback
        assert allocator.catalog.remaining("BosBankrut") == Decimal("105.00")
        assert allocator.catalog.remaining("mZysk") == Decimal("0")

    def test_no_options_leaves_budgets(
        self, allocator: PaymentAllocator, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """No candidates -> None and no debit."""
        monkeypatch.setattr(
            allocator.generator, "generate", lambda o, budgets=None: []
        )
        assert allocator.allocate(Order(id="X", value=Decimal("1"))) is None
        assert allocator.catalog.usage()["PUNKTY"] == 0


# ── Test: edge cases ─────────────────────────────────────────────────


class TestEdgeCases:
    """Tests for empty, degenerate and duplicate inputs."""

    def test_empty_batch(self, allocator: PaymentAllocator) -> None:
        """No orders -> nothing committed, nothing spent."""
        result = allocator.run([])
        assert result.assignments == []
        assert result.unpaid == []
        assert all(v == 0 for v in result.usage.values())

    def test_no_points_method(
        self, methods: list[PaymentMethod], config: Settings
    ) -> None:
        """Without points, promotions still work."""
        order = Order(id="X", value=Decimal("100"), promotions=["mZysk"])
        result = allocate_payments([order], methods[1:], config)
        assert result.assignment_for("X").option.kind is OptionKind.PROMOTION

    def test_no_payment_methods(self, orders: list[Order], config: Settings) -> None:
        """An empty catalog leaves every order unpaid."""
        result = allocate_payments(orders, [], config)
        assert result.assignments == []
        assert sorted(result.unpaid) == ["ORDER1", "ORDER2", "ORDER3", "ORDER4"]

    def test_duplicate_order_committed_once(
        self, methods: list[PaymentMethod], config: Settings
    ) -> None:
        """A second copy of a committed id is skipped."""
        dup = Order(id="DUP", value=Decimal("10.00"), promotions=["mZysk"])
        result = allocate_payments([dup, dup], methods, config)
        assert [a.order_id for a in result.assignments] == ["DUP"]
        assert result.skipped == ["DUP"]

    def test_duplicate_paid_after_unpaid_copy(self, config: Settings) -> None:
        """An id whose later copy commits is not also reported unpaid."""
        methods = [PaymentMethod(id="Card", discount=0, limit=Decimal("50"))]
        big = Order(id="DUP", value=Decimal("100"), promotions=["Card"])
        small = Order(id="DUP", value=Decimal("10"), promotions=["Card"])

        result = allocate_payments([big, small], methods, config)

        assert [a.order.value for a in result.assignments] == [Decimal("10")]
        assert result.unpaid == []
        assert result.skipped == []

    def test_unpaid_duplicates_listed_once(self, config: Settings) -> None:
        """Several unpaid copies of one id appear once in unpaid."""
        dup = Order(id="DUP", value=Decimal("100"))
        result = allocate_payments([dup, dup], [], config)
        assert result.unpaid == ["DUP"]

    def test_zero_value_order(
        self, methods: list[PaymentMethod], config: Settings
    ) -> None:
        """A free order commits without debiting anything."""
        order = Order(id="FREE", value=Decimal("0"))
        result = allocate_payments([order], methods, config)
        assert result.assignment_for("FREE") is not None
        assert all(v == 0 for v in result.usage.values())

    def test_custom_points_method_id(self) -> None:
        """The points method id comes from settings."""
        config = Settings(_env_file=None, points_method_id="POINTS")
        methods = [
            PaymentMethod(id="POINTS", discount=20, limit=Decimal("100")),
            PaymentMethod(id="Card", discount=0, limit=Decimal("100")),
        ]
        order = Order(id="X", value=Decimal("100"))
        result = allocate_payments([order], methods, config)
        assert result.assignment_for("X").option.kind is OptionKind.POINTS
        assert result.usage["POINTS"] == Decimal("80")


# ── Test: run-wide properties ────────────────────────────────────────


def _random_batch(seed: int) -> tuple[list[Order], list[PaymentMethod]]:
    """Build a reproducible random batch for the given seed."""
    rng = random.Random(seed)
    cards = [f"CARD{i}" for i in range(rng.randint(1, 4))]
    methods = [
        PaymentMethod(
            id="PUNKTY",
            discount=rng.randint(0, 30),
            limit=Decimal(rng.randint(0, 30000)) / 100,
        )
    ] + [
        PaymentMethod(
            id=card,
            discount=rng.randint(0, 25),
            limit=Decimal(rng.randint(0, 50000)) / 100,
        )
        for card in cards
    ]
    orders = [
        Order(
            id=f"ORDER{i}",
            value=Decimal(rng.randint(0, 40000)) / 100,
            promotions=rng.sample(cards + ["Ghost"], rng.randint(0, 2)) or None,
        )
        for i in range(rng.randint(1, 15))
    ]
    return orders, methods


@pytest.mark.parametrize("seed", range(12))
class TestProperties:
    """Invariants that hold for any batch."""

    def test_budgets_stay_within_limits(self, seed: int, config: Settings) -> None:
        """Remaining budget stays between zero and the limit."""
        orders, methods = _random_batch(seed)
        allocator = PaymentAllocator.from_methods(methods, config)
        result = allocator.run(orders)
        for method in methods:
            remaining = allocator.catalog.remaining(method.id)
            assert Decimal(0) <= remaining <= method.limit
            assert result.usage[method.id] == method.limit - remaining

    def test_exact_consumption(self, seed: int, config: Settings) -> None:
        """Points + card == value - discount, and spend matches it in total."""
        orders, methods = _random_batch(seed)
        result = allocate_payments(orders, methods, config)
        for a in result.assignments:
            assert a.option.points_used + a.card_amount == a.order.value - a.option.discount
            assert a.card_amount >= 0
        spent = sum(result.usage.values(), Decimal(0))
        paid = sum(
            (a.order.value - a.option.discount for a in result.assignments), Decimal(0)
        )
        assert spent == paid

    def test_every_order_decided_once(self, seed: int, config: Settings) -> None:
        """Each order is either committed once or unpaid."""
        orders, methods = _random_batch(seed)
        result = allocate_payments(orders, methods, config)
        committed = [a.order_id for a in result.assignments]
        assert len(committed) == len(set(committed))
        assert set(committed).isdisjoint(result.unpaid)
        assert len(committed) + len(result.unpaid) == len(orders)

    def test_combo_minimum(self, seed: int, config: Settings) -> None:
        """Combo uses at least 10% in points for exactly 10% off."""
        orders, methods = _random_batch(seed)
        result = allocate_payments(orders, methods, config)
        for a in result.assignments:
            if a.option.kind is OptionKind.COMBO:
                assert a.option.points_used >= a.order.value / 10
                assert a.option.discount == a.order.value / 10

    def test_rank_score_is_upper_bound(self, seed: int, config: Settings) -> None:
        """No order earns more than its ranking score."""
        orders, methods = _random_batch(seed)
        ranker = OrderRanker(PaymentCatalog(methods, "PUNKTY"), config)
        result = allocate_payments(orders, methods, config)
        for a in result.assignments:
            assert ranker.max_discount(a.order) >= a.option.discount

    def test_deterministic(self, seed: int, config: Settings) -> None:
        """Two runs on the same input give the same outcome."""
        orders, methods = _random_batch(seed)
        reporter = UsageReporter()
        first = allocate_payments(orders, methods, config)
        second = allocate_payments(list(orders), methods, config)
        assert reporter.lines(first) == reporter.lines(second)
        assert first.assignments == second.assignments
