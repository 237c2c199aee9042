"""
Balance Reconciliation Module.

Validates movements against balance checkpoints by:
1. Sorting checkpoints by date and deriving one period per checkpoint
2. Summing each period's movements onto the previous checkpoint's balance
3. Comparing calculated vs declared balance
4. Classifying each mismatch as suspected duplicates or missing movements
"""
import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from config import get_config
from normalizer.amount_parser import amounts_equal, round_money
from parsers.base_parser import Checkpoint, Movement
from reconciler.duplicates import find_potential_duplicates
from reconciler.periods import Period, build_periods
from reconciler.reasons import (
    BalanceMismatchReason,
    DuplicateSuspectedReason,
    MissingMovementsReason,
    ValidationReason,
    ValidationResult,
)

logger = logging.getLogger(__name__)


class MovementValidator:
    """
    Reconciles a ledger of movements against balance checkpoints.

    Validation is a pure computation: inputs are never modified and no
    state is kept between calls, so one instance can serve any number of
    concurrent requests.

    Sign convention for differences: positive means the movements add up
    to more money than declared (surplus, e.g. duplicates), negative means
    less (deficit, movements missing).
    """

    def __init__(self, duplicate_window_days: Optional[int] = None):
        """
        Initialize the validator.

        Args:
            duplicate_window_days: Date window for the similar-label duplicate
                                   detector (default from configuration)
        """
        if duplicate_window_days is None:
            duplicate_window_days = get_config().duplicate_window_days
        self.duplicate_window_days = duplicate_window_days

    def validate(
        self,
        movements: Sequence[Movement],
        balances: Sequence[Checkpoint]
    ) -> ValidationResult:
        """
        Check that the movements explain every balance checkpoint.

        An empty checkpoint list yields no periods and a valid result.

        Args:
            movements: Movements in any order
            balances: Balance checkpoints in any order

        Returns:
            ValidationResult with reasons in checkpoint order, each mismatch
            followed by its classification
        """
        reasons: List[ValidationReason] = []

        for period in build_periods(movements, balances):
            reasons.extend(self.check_period(period))

        result = ValidationResult(reasons=tuple(reasons))
        logger.debug(
            f"Validated {len(movements)} movements against {len(balances)} "
            f"checkpoints: {'accepted' if result.is_valid else f'{len(reasons)} reason(s)'}"
        )
        return result

    def check_period(self, period: Period) -> List[ValidationReason]:
        """
        Compare one period's calculated balance with its checkpoint.

        Returns:
            Empty list if the balances agree, otherwise the mismatch
            followed by any classifier reasons
        """
        logger.debug(
            f"Period {period.index} ({period.start or 'beginning'} .. {period.end}): "
            f"{len(period.movements)} movements, sum {period.movements_sum}, "
            f"calculated {period.calculated_balance}, expected {period.expected_balance}"
        )

        if amounts_equal(period.calculated_balance, period.expected_balance):
            return []

        difference = round_money(period.calculated_balance - period.expected_balance)
        logger.info(f"Balance mismatch at {period.end}: difference {difference}")

        reasons: List[ValidationReason] = [BalanceMismatchReason(
            checkpoint_date=period.end,
            expected_balance=period.expected_balance,
            calculated_balance=period.calculated_balance,
            difference=difference,
        )]
        reasons.extend(self.analyze_mismatch(period, difference))
        return reasons

    def analyze_mismatch(self, period: Period, difference: Decimal) -> List[ValidationReason]:
        """
        Classify a mismatch by the sign of its difference.

        A surplus yields at most one DuplicateSuspectedReason; a deficit
        always yields exactly one MissingMovementsReason.
        """
        if difference > 0:
            suspects = find_potential_duplicates(
                period.movements,
                difference,
                window_days=self.duplicate_window_days,
            )
            if suspects:
                return [DuplicateSuspectedReason(
                    checkpoint_date=period.end,
                    movements=tuple(suspects),
                )]
            return []

        if difference < 0:
            return [MissingMovementsReason(
                checkpoint_date=period.end,
                missing_amount=abs(difference),
                period_start=period.start,
                period_end=period.end,
            )]

        return []


def validate(movements: Sequence[Movement], balances: Sequence[Checkpoint]) -> ValidationResult:
    """Validate with default settings."""
    return MovementValidator().validate(movements, balances)
