"""Allocation endpoints.

Runs one allocation batch per request, either from a JSON body or from
uploaded orders / payment-methods files. Nothing is kept between requests.
"""

from __future__ import annotations

from fastapi import APIRouter, File, HTTPException, UploadFile

from payopt.core.config import settings
from payopt.core.logging import get_logger
from payopt.schemas.allocation import AllocationRequest, AllocationResponse
from payopt.services.allocation.allocator import allocate_payments
from payopt.services.allocation.reporter import UsageReporter
from payopt.services.ingestion.base_parser import InputFileError
from payopt.services.ingestion.json_parser import (
    OrdersJsonParser,
    PaymentMethodsJsonParser,
)

logger = get_logger(__name__)

router = APIRouter()

_reporter = UsageReporter()


@router.post("/run", response_model=AllocationResponse)
def run_allocation(body: AllocationRequest) -> AllocationResponse:
    """Allocate payment methods for the orders in the request body.

    Returns per-method usage, each committed assignment, and the orders
    that could not be paid.
    """
    logger.info(
        "Allocation requested: orders=%d methods=%d",
        len(body.orders),
        len(body.payment_methods),
    )
    try:
        result = allocate_payments(body.orders, body.payment_methods, settings)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return _reporter.summary(result)


@router.post("/upload", response_model=AllocationResponse)
async def upload_and_allocate(
    orders: UploadFile = File(..., description="orders.json"),
    payment_methods: UploadFile = File(..., description="paymentmethods.json"),
) -> AllocationResponse:
    """Allocate from uploaded orders and payment-methods JSON files."""
    orders_content = await orders.read()
    methods_content = await payment_methods.read()
    if not orders_content or not methods_content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty.")

    logger.info(
        "Received upload: orders=%s (%d bytes) methods=%s (%d bytes)",
        orders.filename,
        len(orders_content),
        payment_methods.filename,
        len(methods_content),
    )

    try:
        order_records = OrdersJsonParser().parse(
            orders_content, orders.filename or "orders.json"
        )
        method_records = PaymentMethodsJsonParser().parse(
            methods_content, payment_methods.filename or "paymentmethods.json"
        )
    except InputFileError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    result = allocate_payments(order_records, method_records, settings)
    return _reporter.summary(result)
