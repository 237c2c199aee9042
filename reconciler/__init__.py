"""Reconciliation module for balance verification."""
from reconciler.balance_checker import MovementValidator, validate
from reconciler.periods import Period, build_periods
from reconciler.reasons import (
    BalanceMismatchReason,
    DuplicateSuspectedReason,
    MissingMovementsReason,
    ValidationReasonType,
    ValidationResult,
)

__all__ = [
    "MovementValidator",
    "validate",
    "Period",
    "build_periods",
    "BalanceMismatchReason",
    "DuplicateSuspectedReason",
    "MissingMovementsReason",
    "ValidationReasonType",
    "ValidationResult",
]
