"""
Input records and the abstract base class for input parsers.
"""
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from config import CHECKPOINT_FIELDS, MOVEMENT_FIELDS, get_config
from normalizer.amount_parser import parse_amount, to_number
from normalizer.date_parser import parse_date


@dataclass(frozen=True)
class Movement:
    """
    A single dated, labeled, signed monetary movement.
    """
    id: int
    date: date
    label: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        """Convert movement to its wire representation."""
        return {
            'id': self.id,
            'date': self.date.isoformat(),
            'label': self.label,
            'amount': to_number(self.amount),
        }


@dataclass(frozen=True)
class Checkpoint:
    """
    An externally attested balance at a given date.
    """
    date: date
    balance: Decimal

    def to_dict(self) -> Dict[str, Any]:
        """Convert checkpoint to its wire representation."""
        return {
            'date': self.date.isoformat(),
            'balance': to_number(self.balance),
        }


@dataclass
class ValidationIssue:
    """
    Represents a problem found while reading input.
    """
    path: str
    issue_type: str
    message: str
    row_numbers: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': self.path,
            'type': self.issue_type,
            'message': self.message,
        }


class InvalidInputError(ValueError):
    """Raised when input cannot be turned into movements and checkpoints."""

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        summary = "; ".join(f"{i.path}: {i.message}" for i in issues[:5])
        if len(issues) > 5:
            summary += f" (and {len(issues) - 5} more)"
        super().__init__(f"Invalid input: {summary}")


class BaseParser(ABC):
    """
    Abstract base class for input parsers.

    Subclasses read their source into raw records and hand each one to
    the shared field checks below, so every front end rejects the same
    shapes with the same issue types.
    """

    def __init__(self):
        self._movements: List[Movement] = []
        self._checkpoints: List[Checkpoint] = []
        self._validation_issues: List[ValidationIssue] = []

    @abstractmethod
    def parse(self) -> Tuple[List[Movement], List[Checkpoint]]:
        """
        Read the input and return movements and checkpoints.

        Returns:
            Tuple of (movements, checkpoints)

        Raises:
            InvalidInputError: if any issue was found
        """
        pass

    def _add_issue(
        self,
        path: str,
        issue_type: str,
        message: str,
        row_number: Optional[int] = None
    ) -> None:
        self._validation_issues.append(ValidationIssue(
            path=path,
            issue_type=issue_type,
            message=message,
            row_numbers=[row_number] if row_number is not None else [],
        ))

    def _check_fields(
        self,
        record: Any,
        path: str,
        allowed: List[str],
        row_number: Optional[int] = None
    ) -> bool:
        """Report non-object records, missing fields and unknown fields."""
        if not isinstance(record, dict):
            self._add_issue(path, "not_an_object", "must be an object", row_number)
            return False

        ok = True
        for name in allowed:
            if name not in record or record[name] is None:
                self._add_issue(f"{path}.{name}", "missing_field", "is required", row_number)
                ok = False
        for name in record:
            if name not in allowed:
                self._add_issue(f"{path}.{name}", "unknown_field",
                                "is not an allowed field", row_number)
                ok = False
        return ok

    def _read_id(self, value: Any, path: str, strict: bool,
                 row_number: Optional[int] = None) -> Optional[int]:
        if isinstance(value, bool):
            value = None
        elif isinstance(value, int):
            return value
        elif not strict and isinstance(value, str) and re.fullmatch(r'\s*-?\d+\s*', value):
            return int(value)

        self._add_issue(path, "invalid_id", "must be an integer", row_number)
        return None

    def _read_date(self, value: Any, path: str, strict: bool,
                   row_number: Optional[int] = None) -> Optional[date]:
        parsed = None
        if isinstance(value, str) or (not strict and isinstance(value, date)):
            parsed = parse_date(value)

        if parsed is None:
            self._add_issue(path, "invalid_date", "must be an ISO-8601 date string", row_number)
        return parsed

    def _read_label(self, value: Any, path: str,
                    row_number: Optional[int] = None) -> Optional[str]:
        if isinstance(value, str):
            return value
        self._add_issue(path, "invalid_label", "must be a string", row_number)
        return None

    def _read_amount(self, value: Any, path: str, strict: bool,
                     row_number: Optional[int] = None) -> Optional[Decimal]:
        amount = None
        if not strict or isinstance(value, (int, float)):
            amount = parse_amount(value)

        if amount is None:
            self._add_issue(path, "invalid_number", "must be a finite number", row_number)
        return amount

    def _build_movement(self, record: Any, path: str, strict: bool,
                        row_number: Optional[int] = None) -> Optional[Movement]:
        """Validate one raw movement record; issues are collected, not raised."""
        if not self._check_fields(record, path, MOVEMENT_FIELDS, row_number):
            return None

        movement_id = self._read_id(record['id'], f"{path}.id", strict, row_number)
        movement_date = self._read_date(record['date'], f"{path}.date", strict, row_number)
        label = self._read_label(record['label'], f"{path}.label", row_number)
        amount = self._read_amount(record['amount'], f"{path}.amount", strict, row_number)

        if movement_id is None or movement_date is None or label is None or amount is None:
            return None
        return Movement(id=movement_id, date=movement_date, label=label, amount=amount)

    def _build_checkpoint(self, record: Any, path: str, strict: bool,
                          row_number: Optional[int] = None) -> Optional[Checkpoint]:
        """Validate one raw checkpoint record; issues are collected, not raised."""
        if not self._check_fields(record, path, CHECKPOINT_FIELDS, row_number):
            return None

        checkpoint_date = self._read_date(record['date'], f"{path}.date", strict, row_number)
        balance = self._read_amount(record['balance'], f"{path}.balance", strict, row_number)

        if checkpoint_date is None or balance is None:
            return None
        return Checkpoint(date=checkpoint_date, balance=balance)

    def _check_limits(self, movement_count: int, checkpoint_count: int) -> None:
        """Apply the configured size limits and the non-empty checkpoint rule."""
        config = get_config()
        if checkpoint_count < 1:
            self._add_issue("balances", "empty_balances",
                            "At least one balance checkpoint is required")
        if checkpoint_count > config.max_balances:
            self._add_issue("balances", "too_many_items",
                            f"must not contain more than {config.max_balances} items")
        if movement_count > config.max_movements:
            self._add_issue("movements", "too_many_items",
                            f"must not contain more than {config.max_movements} items")

    def _raise_if_invalid(self) -> None:
        if self._validation_issues:
            raise InvalidInputError(list(self._validation_issues))

    @property
    def movements(self) -> List[Movement]:
        """Get the parsed movements."""
        return self._movements

    @property
    def checkpoints(self) -> List[Checkpoint]:
        """Get the parsed checkpoints."""
        return self._checkpoints

    @property
    def validation_issues(self) -> List[ValidationIssue]:
        """Get validation issues."""
        return self._validation_issues

    def get_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the parsed input.

        Returns:
            Dictionary with summary statistics
        """
        dates = [m.date for m in self._movements]
        return {
            'total_movements': len(self._movements),
            'total_checkpoints': len(self._checkpoints),
            'total_inflows': sum((m.amount for m in self._movements if m.amount > 0), Decimal(0)),
            'total_outflows': sum((-m.amount for m in self._movements if m.amount < 0), Decimal(0)),
            'date_range': (min(dates), max(dates)) if dates else (None, None),
        }
