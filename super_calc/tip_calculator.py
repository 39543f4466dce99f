"""Tip and bill splitting."""

from dataclasses import dataclass
from typing import Union

from .config import SPLIT_COUNT_RANGE, TIP_PERCENTAGE_RANGE
from .converter import parse_number
from .errors import InvalidInputError
from .history import HistoryItem, HistoryKind


@dataclass(frozen=True)
class TipResult:
    """Tip breakdown at full float precision."""

    bill: float
    tip_percentage: int
    split_count: int
    tip: float
    total: float
    per_person: float

    @property
    def summary(self) -> str:
        return (
            f"Bill: ${self.bill:.2f}, Tip: ${self.tip:.2f} ({self.tip_percentage}%), "
            f"Total: ${self.total:.2f}, Per Person: ${self.per_person:.2f}"
        )

    def to_history_item(self) -> HistoryItem:
        return HistoryItem.create(HistoryKind.TIP, result=self.summary, category="Tip")


def _check_range(name: str, value: int, bounds) -> int:
    low, high = bounds
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise InvalidInputError(f"{name} must be an integer between {low} and {high}")
    return value


def calculate_tip(
    bill: Union[str, int, float],
    tip_percentage: int = 15,
    split_count: int = 1,
) -> TipResult:
    """Compute tip, total and per-person share.

    Args:
        bill: Bill amount; must parse as a finite number.
        tip_percentage: Whole percent, 0-30.
        split_count: Number of people, 1-20.

    Returns:
        TipResult.

    Raises:
        InvalidInputError: Invalid bill, or percentage/split out of range.
    """
    amount = parse_number(bill, what="bill amount")
    _check_range("Tip percentage", tip_percentage, TIP_PERCENTAGE_RANGE)
    _check_range("Split count", split_count, SPLIT_COUNT_RANGE)

    tip = amount * tip_percentage / 100
    total = amount + tip
    return TipResult(
        bill=amount,
        tip_percentage=tip_percentage,
        split_count=split_count,
        tip=tip,
        total=total,
        per_person=total / split_count,
    )
