"""
Error taxonomy for the quote engine.

Each error knows its HTTP status and carries a user-facing (Korean) message,
so the hosting service can render any failure without inspecting it.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional


class MarketplaceError(Exception):
    """Base class for all engine failures."""
    code = "error"
    status_code = 500
    default_message = "서버 오류가 발생했습니다."

    def __init__(self, message: Optional[str] = None, details: Optional[list] = None):
        self.message = message or self.default_message
        self.details = details or []
        super().__init__(self.message)

    def to_payload(self) -> dict:
        payload = {"success": False, "error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class SchemaError(MarketplaceError):
    """Malformed or out-of-range input. `details` lists per-field violations."""
    code = "schema_error"
    status_code = 400
    default_message = "입력값을 확인해주세요."


class TotalMismatchError(MarketplaceError):
    code = "total_mismatch"
    status_code = 400
    default_message = "총액이 항목 합계와 일치하지 않습니다."

    def __init__(self, computed: Decimal, declared: Decimal, tolerance: Decimal):
        self.computed = computed
        self.declared = declared
        self.tolerance = tolerance
        super().__init__(details=[
            f"totalAmount: declared {declared}, line items sum to {computed} "
            f"(tolerance {tolerance})"
        ])


class NotFoundError(MarketplaceError):
    code = "not_found"
    status_code = 404
    default_message = "요청한 데이터를 찾을 수 없습니다."


class ForbiddenError(MarketplaceError):
    code = "forbidden"
    status_code = 403
    default_message = "해당 프로젝트에 대한 권한이 없습니다."


class CooldownActiveError(MarketplaceError):
    """A distribution round is still cooling down for this project."""
    code = "cooldown_active"
    status_code = 409
    default_message = "쿨다운 중입니다. 잠시 후 다시 시도해주세요."

    def __init__(self, cooldown_until: datetime):
        self.cooldown_until = cooldown_until
        super().__init__()

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["cooldownUntil"] = self.cooldown_until.isoformat()
        return payload


class NoEligibleVendorsError(MarketplaceError):
    code = "no_eligible_vendors"
    status_code = 404
    default_message = "조건에 맞는 업체를 찾을 수 없습니다."


class InvalidCardinalityError(MarketplaceError):
    code = "invalid_cardinality"
    status_code = 400
    default_message = "2~3개의 견적 ID가 필요합니다."

    def __init__(self, count: int):
        self.count = count
        super().__init__(details=[f"quoteIds: expected 2 to 3 quotes, got {count}"])


class PartialPersistenceWarning(UserWarning):
    """
    The primary effect happened but a secondary write did not.

    Logged and reported alongside a successful result, never raised to callers.
    """

    def __init__(self, effect: str, error: Exception):
        self.effect = effect
        self.error = error
        super().__init__(f"{effect} failed: {error}")
