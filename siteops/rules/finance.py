"""
Portfolio finance aggregation.

A pure fold over whatever finance records were read; nothing is cached or
maintained incrementally. Sums are taken in Decimal so the two-decimal
efficiency figure does not pick up binary float noise.
"""
from dataclasses import asdict, dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable

from siteops.core.enums import ExpenseCategory
from siteops.core.exceptions import ValidationException

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class FinanceSummary:
    total_invested: float
    able_to_bill: float
    pending: float
    efficiency: float
    project_count: int

    def as_dict(self) -> dict:
        return asdict(self)


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value or 0))


def efficiency_ratio(total_invested: Any, able_to_bill: Any) -> float:
    """Billable share of the investment as a percentage, rounded half-up to 2 places."""
    invested = _decimal(total_invested)
    if invested <= 0:
        return 0.0
    ratio = _decimal(able_to_bill) / invested * 100
    return float(ratio.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def summarize(records: Iterable[Any]) -> FinanceSummary:
    """Aggregate records exposing ``total_invested`` and ``able_to_bill``."""
    total_invested = Decimal(0)
    able_to_bill = Decimal(0)
    count = 0
    for record in records:
        total_invested += _decimal(record.total_invested)
        able_to_bill += _decimal(record.able_to_bill)
        count += 1

    return FinanceSummary(
        total_invested=float(total_invested),
        able_to_bill=float(able_to_bill),
        pending=float(total_invested - able_to_bill),
        efficiency=efficiency_ratio(total_invested, able_to_bill),
        project_count=count,
    )


def validate_amount(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValidationException(f"{field} must be a number", field=field, value=value)
    if value < 0:
        raise ValidationException(f"{field} must be a positive number", field=field, value=value)
    return float(value)


def parse_expense_category(value: Any) -> ExpenseCategory:
    try:
        return ExpenseCategory(value)
    except ValueError:
        allowed = ", ".join(member.value for member in ExpenseCategory)
        raise ValidationException(
            f"Invalid category '{value}'. Must be one of: {allowed}", field="category", value=value
        )
