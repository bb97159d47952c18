"""
Quote validator.

Two gates, in order:
1. Shape - field presence, types and bounds (SchemaError with one message per violation)
2. Arithmetic - sum(unitPrice x quantity) must be within TOTAL_TOLERANCE of totalAmount

Nothing is persisted here; the caller writes only what comes back.
"""

from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from .errors import SchemaError, TotalMismatchError
from .models import LineItem, QuoteStatus, ValidatedQuote
from .schemas import QuoteSubmission

# Allowed gap between declared total and line-item sum (currency units)
TOTAL_TOLERANCE = Decimal("100")


def validate_quote(payload: Any, vendor_id: str) -> ValidatedQuote:
    """
    Validate a raw quote submission from `vendor_id`.

    Args:
        payload: Decoded JSON body ({projectId, lineItems, totalAmount, validUntil?})
        vendor_id: Submitting vendor, supplied by the auth layer

    Returns:
        ValidatedQuote with status PENDING

    Raises:
        SchemaError: shape violations, or a missing vendor identity
        TotalMismatchError: declared total off by more than TOTAL_TOLERANCE
    """
    if not vendor_id:
        raise SchemaError(details=["vendorId: submitting vendor identity is required"])
    if not isinstance(payload, dict):
        raise SchemaError(details=["body: expected a JSON object"])

    try:
        submission = QuoteSubmission.model_validate(payload)
    except ValidationError as e:
        raise SchemaError(details=format_validation_errors(e)) from e

    line_items = [
        LineItem(
            category=item.category,
            unit_price=item.unit_price,
            quantity=item.quantity,
            included=item.included,
            excluded=item.excluded,
            assumptions=item.assumptions,
            material_spec=item.material_spec,
        )
        for item in submission.line_items
    ]

    computed = compute_total(line_items)
    if abs(computed - submission.total_amount) > TOTAL_TOLERANCE:
        raise TotalMismatchError(computed, submission.total_amount, TOTAL_TOLERANCE)

    return ValidatedQuote(
        project_id=submission.project_id,
        vendor_id=vendor_id,
        line_items=line_items,
        total_amount=submission.total_amount,
        computed_total=computed,
        valid_until=submission.valid_until,
        status=QuoteStatus.PENDING,
    )


def compute_total(line_items: list[LineItem]) -> Decimal:
    return sum((item.amount for item in line_items), Decimal("0"))


def format_validation_errors(error: ValidationError) -> list[str]:
    """
    Flatten pydantic errors into "path: message" strings.

    Example:
        lineItems.0.quantity: Input should be greater than 0
    """
    messages = []
    for err in error.errors():
        path = ".".join(str(part) for part in err.get("loc", ())) or "body"
        messages.append(f"{path}: {err.get('msg', 'invalid value')}")
    return messages
