"""
Period derivation from balance checkpoints.

Checkpoints are sorted by date and each one closes a period that starts
right after the previous checkpoint (or at the beginning of time for the
first). A movement dated on a checkpoint belongs to the period ending
there, so periods never overlap and leave no gaps.
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from normalizer.amount_parser import round_money
from parsers.base_parser import Checkpoint, Movement


@dataclass(frozen=True)
class Period:
    """A reconciliation period closed by one checkpoint."""
    index: int
    start: Optional[date]  # exclusive; None means unbounded
    end: date              # inclusive
    opening_balance: Decimal
    expected_balance: Decimal
    movements: Tuple[Movement, ...]
    movements_sum: Decimal
    calculated_balance: Decimal

    @property
    def is_unbounded(self) -> bool:
        return self.start is None


def sort_checkpoints(checkpoints: Sequence[Checkpoint]) -> List[Checkpoint]:
    """Return checkpoints in ascending date order; same-date ones keep input order."""
    return sorted(checkpoints, key=lambda c: c.date)


def sort_movements(movements: Sequence[Movement]) -> List[Movement]:
    """Return movements in ascending date order; same-date ones keep input order."""
    return sorted(movements, key=lambda m: m.date)


def select_movements(
    movements: Sequence[Movement],
    start: Optional[date],
    end: date
) -> List[Movement]:
    """Movements dated after start (if any) and on or before end."""
    if start is None:
        return [m for m in movements if m.date <= end]
    return [m for m in movements if start < m.date <= end]


def sum_amounts(movements: Sequence[Movement]) -> Decimal:
    return sum((m.amount for m in movements), Decimal(0))


def build_periods(
    movements: Sequence[Movement],
    checkpoints: Sequence[Checkpoint]
) -> List[Period]:
    """
    Derive one period per checkpoint and compute its running balance.

    The opening balance of each period is the previous checkpoint's declared
    balance, so an error in one period does not carry into the next. The
    first period opens at zero.

    Args:
        movements: Movements in any order
        checkpoints: Checkpoints in any order; may be empty

    Returns:
        Periods in chronological order
    """
    ordered_checkpoints = sort_checkpoints(checkpoints)
    ordered_movements = sort_movements(movements)

    periods: List[Period] = []
    previous: Optional[Checkpoint] = None

    for index, checkpoint in enumerate(ordered_checkpoints):
        start = previous.date if previous is not None else None
        opening = previous.balance if previous is not None else Decimal(0)

        selected = select_movements(ordered_movements, start, checkpoint.date)
        movements_sum = sum_amounts(selected)

        periods.append(Period(
            index=index,
            start=start,
            end=checkpoint.date,
            opening_balance=opening,
            expected_balance=checkpoint.balance,
            movements=tuple(selected),
            movements_sum=movements_sum,
            calculated_balance=round_money(opening + movements_sum),
        ))
        previous = checkpoint

    return periods
