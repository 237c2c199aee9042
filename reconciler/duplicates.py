"""
Duplicate-suspicion heuristics for periods with a balance surplus.

When movements add up to more than the declared balance, the extra money
may come from movements recorded twice. Two independent detectors look for
that:

1. Exact amount match: movements sharing a positive amount whose count of
   extra copies would explain the surplus.
2. Similar label: pairs with the same amount and the same normalized label
   within a few days of each other.

These are signals, not proofs. When several movements share an amount the
whole group is flagged; no attempt is made to pick the exact subset.
"""
import re
from collections import OrderedDict
from datetime import timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from config import DUPLICATE_WINDOW_DAYS
from normalizer.amount_parser import amounts_equal, round_money
from parsers.base_parser import Movement


def normalize_label(label: str) -> str:
    """Case-fold, trim and collapse internal whitespace."""
    return re.sub(r'\s+', ' ', label.strip()).casefold()


def labels_similar(first: str, second: str) -> bool:
    return normalize_label(first) == normalize_label(second)


def group_by_amount(movements: Sequence[Movement]) -> Dict[Decimal, List[Movement]]:
    """Group movements by amount in cents, in order of first appearance."""
    groups: Dict[Decimal, List[Movement]] = OrderedDict()
    for movement in movements:
        groups.setdefault(round_money(movement.amount), []).append(movement)
    return groups


def find_exact_amount_duplicates(
    movements: Sequence[Movement],
    target_difference: Decimal
) -> List[Movement]:
    """
    Flag groups of same-amount movements that could explain the surplus.

    A group of n >= 2 movements sharing a positive amount is flagged when
    the amount times k equals the surplus for some k in 1..n-1, i.e. when
    k of the copies being spurious would account for it.
    """
    flagged: List[Movement] = []

    for amount, group in group_by_amount(movements).items():
        if len(group) < 2 or amount <= 0:
            continue

        if any(amounts_equal(amount * k, target_difference) for k in range(1, len(group))):
            flagged.extend(group)

    return flagged


def find_similar_label_duplicates(
    movements: Sequence[Movement],
    window_days: int = DUPLICATE_WINDOW_DAYS
) -> List[Movement]:
    """
    Flag pairs with equal amount and label dated within window_days of each other.

    Pairs are scanned in movement order; each movement is reported once.
    """
    window = timedelta(days=window_days)
    flagged: List[Movement] = []
    seen_ids = set()

    for i, first in enumerate(movements):
        for second in movements[i + 1:]:
            if first.amount != second.amount:
                continue
            if not labels_similar(first.label, second.label):
                continue
            if abs(first.date - second.date) > window:
                continue

            for movement in (first, second):
                if movement.id not in seen_ids:
                    seen_ids.add(movement.id)
                    flagged.append(movement)

    return flagged


def find_potential_duplicates(
    movements: Sequence[Movement],
    target_difference: Decimal,
    window_days: Optional[int] = None
) -> List[Movement]:
    """
    Union of both detectors, exact-amount matches first, without repeats.

    Args:
        movements: The period's movements, in chronological order
        target_difference: The positive surplus to explain
        window_days: Date window for the similar-label detector

    Returns:
        Suspected duplicates in the order they were first flagged
    """
    if window_days is None:
        window_days = DUPLICATE_WINDOW_DAYS

    suspects: List[Movement] = []
    seen_ids = set()

    candidates = find_exact_amount_duplicates(movements, target_difference)
    candidates += find_similar_label_duplicates(movements, window_days)

    for movement in candidates:
        if movement.id not in seen_ids:
            seen_ids.add(movement.id)
            suspects.append(movement)

    return suspects
