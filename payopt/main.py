"""Payment Method Allocator - HTTP application."""

from fastapi import FastAPI

from payopt.api.routes import allocation
from payopt.core.config import settings
from payopt.core.logging import setup_logging

logger = setup_logging(settings.log_level)

tags_metadata = [
    {
        "name": "Health",
        "description": "Service health and readiness checks.",
    },
    {
        "name": "Allocation",
        "description": (
            "Assign a payment method (or points plus card) to each order of a "
            "batch so as to maximize total discount under per-method limits."
        ),
    },
]


app = FastAPI(
    title="Payment Method Allocator",
    description=(
        "## Discount-maximizing payment allocation\n\n"
        "Given a batch of orders and a set of payment methods with discount "
        "rates and spending limits, picks one payment option per order:\n\n"
        "- `promotion` - full order on a promoted card, at the card's discount\n"
        "- `points` - full order in loyalty points, at the points discount\n"
        "- `combo` - at least 10% in points plus a card, flat 10% discount\n\n"
        "Orders are processed greedily, biggest possible discount first.\n"
    ),
    version="1.0.0",
    openapi_tags=tags_metadata,
    license_info={
        "name": "MIT",
    },
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(
    allocation.router, prefix="/api/v1/allocation", tags=["Allocation"]
)

logger.info("Payment allocator API ready - routes registered")


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint.

    Returns a simple JSON object confirming the service is running.
    """
    return {"status": "healthy", "service": "payopt"}
