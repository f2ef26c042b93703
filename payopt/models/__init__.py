"""Domain models for the payment allocator."""

from payopt.models.allocation import AllocationResult, Assignment
from payopt.models.option import OptionKind, PaymentOption

__all__ = [
    "AllocationResult",
    "Assignment",
    "OptionKind",
    "PaymentOption",
]
