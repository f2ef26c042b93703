"""JSON parsers for the orders and payment-methods files."""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from payopt.core.logging import get_logger
from payopt.schemas.order import Order
from payopt.schemas.payment_method import PaymentMethod
from payopt.services.ingestion.base_parser import BaseParser, InputFileError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class JsonArrayParser(BaseParser[ModelT]):
    """Parses a JSON array of objects into pydantic records.

    Expected JSON structure::

        [
            {"id": "ORDER1", "value": "100.00", "promotions": ["mZysk"]},
            {"id": "ORDER2", "value": "200.00"},
            ...
        ]
    """

    model: Type[ModelT]
    record_name: str = "record"

    def parse(self, file_content: bytes, filename: str) -> List[ModelT]:
        """Parse JSON bytes into validated records."""
        try:
            data = json.loads(file_content.decode("utf-8-sig"), parse_float=Decimal)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InputFileError(f"Invalid JSON in {filename}: {exc}") from exc

        if not isinstance(data, list):
            raise InputFileError(
                f"Expected a JSON array of {self.record_name} objects in {filename}, "
                f"got {type(data).__name__}"
            )

        records: List[ModelT] = []
        for idx, item in enumerate(data):
            records.append(self._parse_item(item, filename, idx))

        self._check(records, filename)
        logger.info(
            "JSON parse complete for %s: %d %s records parsed",
            filename,
            len(records),
            self.record_name,
        )
        return records

    def parse_file(self, path: Union[str, Path]) -> List[ModelT]:
        """Read ``path`` from disk and parse it."""
        path = Path(path)
        return self.parse(path.read_bytes(), path.name)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _parse_item(self, item: Any, filename: str, idx: int) -> ModelT:
        if not isinstance(item, dict):
            raise InputFileError(
                f"{filename} item {idx}: expected object, got {type(item).__name__}"
            )
        try:
            return self.model.model_validate(item)
        except ValidationError as exc:
            raise InputFileError(f"{filename} item {idx}: {exc}") from exc

    def _check(self, records: List[ModelT], filename: str) -> None:
        """Cross-record checks; nothing by default."""


class OrdersJsonParser(JsonArrayParser[Order]):
    model = Order
    record_name = "order"

    def _check(self, records: List[Order], filename: str) -> None:
        seen: set[str] = set()
        for order in records:
            if order.id in seen:
                logger.warning("Duplicate order id %s in %s", order.id, filename)
            seen.add(order.id)


class PaymentMethodsJsonParser(JsonArrayParser[PaymentMethod]):
    model = PaymentMethod
    record_name = "payment method"

    def _check(self, records: List[PaymentMethod], filename: str) -> None:
        seen: set[str] = set()
        for method in records:
            if method.id in seen:
                raise InputFileError(
                    f"Duplicate payment method id {method.id!r} in {filename}"
                )
            seen.add(method.id)


def load_orders(path: Union[str, Path]) -> List[Order]:
    return OrdersJsonParser().parse_file(path)


def load_payment_methods(path: Union[str, Path]) -> List[PaymentMethod]:
    return PaymentMethodsJsonParser().parse_file(path)
