"""
Reasons explaining why a set of movements failed validation.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from config import UNBOUNDED_PERIOD_START
from normalizer.amount_parser import format_amount, to_number
from normalizer.date_parser import format_date
from parsers.base_parser import Movement


class ValidationReasonType(str, Enum):
    BALANCE_MISMATCH = "BALANCE_MISMATCH"
    DUPLICATE_SUSPECTED = "DUPLICATE_SUSPECTED"
    MISSING_MOVEMENTS = "MISSING_MOVEMENTS"


@dataclass(frozen=True)
class BalanceMismatchReason:
    """The balance computed from movements differs from a checkpoint."""
    checkpoint_date: date
    expected_balance: Decimal
    calculated_balance: Decimal
    difference: Decimal
    type: ValidationReasonType = field(default=ValidationReasonType.BALANCE_MISMATCH, init=False)

    @property
    def message(self) -> str:
        return (
            f"Balance mismatch on {format_date(self.checkpoint_date)}: "
            f"expected {format_amount(self.expected_balance)}, "
            f"calculated {format_amount(self.calculated_balance)} "
            f"(difference: {format_amount(self.difference, signed=True)})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'message': self.message,
            'checkpointDate': self.checkpoint_date.isoformat(),
            'expectedBalance': to_number(self.expected_balance),
            'calculatedBalance': to_number(self.calculated_balance),
            'difference': to_number(self.difference),
        }


@dataclass(frozen=True)
class DuplicateSuspectedReason:
    """Some movements in the period look like they were counted twice."""
    checkpoint_date: date
    movements: Tuple[Movement, ...]
    type: ValidationReasonType = field(default=ValidationReasonType.DUPLICATE_SUSPECTED, init=False)

    @property
    def message(self) -> str:
        return (
            f"{len(self.movements)} movement(s) possibly duplicated in the period "
            f"ending {format_date(self.checkpoint_date)}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'message': self.message,
            'checkpointDate': self.checkpoint_date.isoformat(),
            'movements': [m.to_dict() for m in self.movements],
        }


@dataclass(frozen=True)
class MissingMovementsReason:
    """Movements worth missing_amount are absent from the period."""
    checkpoint_date: date
    missing_amount: Decimal
    period_start: Optional[date]
    period_end: date
    type: ValidationReasonType = field(default=ValidationReasonType.MISSING_MOVEMENTS, init=False)

    @property
    def message(self) -> str:
        start = format_date(self.period_start) if self.period_start else "the beginning"
        return (
            f"{format_amount(self.missing_amount)} of movements missing between "
            f"{start} and {format_date(self.period_end)}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'message': self.message,
            'checkpointDate': self.checkpoint_date.isoformat(),
            'missingAmount': to_number(self.missing_amount),
            'periodStart': (
                self.period_start.isoformat() if self.period_start else UNBOUNDED_PERIOD_START
            ),
            'periodEnd': self.period_end.isoformat(),
        }


ValidationReason = Union[BalanceMismatchReason, DuplicateSuspectedReason, MissingMovementsReason]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation; valid exactly when there are no reasons."""
    reasons: Tuple[ValidationReason, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.reasons

    def reasons_of(self, reason_type: ValidationReasonType) -> Tuple[ValidationReason, ...]:
        return tuple(r for r in self.reasons if r.type == reason_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'isValid': self.is_valid,
            'reasons': [r.to_dict() for r in self.reasons],
        }
