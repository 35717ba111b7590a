"""Data quality validation for normalized quotes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from papermarket.models.quote import Quote


@dataclass
class ValidationCheck:
    """Single validation check result."""

    name: str
    passed: bool
    message: str = ""


@dataclass
class ValidationResult:
    """Aggregate validation result."""

    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def failed_checks(self) -> list[ValidationCheck]:
        return [c for c in self.checks if not c.passed]


def validate_quote(quote: Quote) -> ValidationResult:
    """Run all quality checks on a quote.

    Checks:
        1. Finite numbers (no NaN/Inf)
        2. Price positive
        3. Change consistency (change and change_percent agree with the
           previous close)
        4. Volume non-negative
    """
    result = ValidationResult()

    # 1. Finite values
    values = [quote.price, quote.change, quote.change_percent]
    values += [v for v in (quote.high, quote.low, quote.open, quote.previous_close) if v is not None]
    bad = sum(1 for v in values if math.isnan(v) or math.isinf(v))
    if bad:
        result.checks.append(ValidationCheck("finite_values", False, f"{bad} NaN/Inf values"))
        return result
    result.checks.append(ValidationCheck("finite_values", True))

    # 2. Price positive
    if quote.price <= 0:
        result.checks.append(
            ValidationCheck("price_positive", False, f"price {quote.price} is not positive")
        )
    else:
        result.checks.append(ValidationCheck("price_positive", True))

    # 3. Change consistency
    base = quote.price - quote.change
    consistent = True
    if quote.previous_close is not None and round(base, 2) != round(quote.previous_close, 2):
        consistent = False
    expected_pct = round(quote.change / base * 100, 2) if base else 0.0
    if abs(expected_pct - quote.change_percent) > 0.01:
        consistent = False
    if consistent:
        result.checks.append(ValidationCheck("change_consistency", True))
    else:
        result.checks.append(
            ValidationCheck(
                "change_consistency",
                False,
                f"change {quote.change} / {quote.change_percent}% disagrees with price {quote.price}",
            )
        )

    # 4. Volume non-negative
    if quote.volume < 0:
        result.checks.append(
            ValidationCheck("volume_non_negative", False, f"volume {quote.volume} is negative")
        )
    else:
        result.checks.append(ValidationCheck("volume_non_negative", True))

    return result
