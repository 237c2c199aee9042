"""
Parser for decoded JSON request bodies.

Expected shape:
    {
        "movements": [{"id": 1, "date": "2024-01-15", "label": "...", "amount": 100}],
        "balances": [{"date": "2024-01-31", "balance": 100}]
    }
"""
import logging
from typing import Any, List, Optional, Tuple

from config import PAYLOAD_FIELDS
from parsers.base_parser import BaseParser, Checkpoint, Movement

logger = logging.getLogger(__name__)


class PayloadParser(BaseParser):
    """
    Validates a JSON body and converts it into movements and checkpoints.

    Types are checked strictly: an id must be a JSON integer, amounts and
    balances JSON numbers, dates strings. Every problem is collected before
    InvalidInputError is raised so the caller can report them all at once.
    """

    def __init__(self, payload: Any):
        super().__init__()
        self.payload = payload

    def parse(self) -> Tuple[List[Movement], List[Checkpoint]]:
        self._validation_issues = []

        if not isinstance(self.payload, dict):
            self._add_issue("$", "not_an_object", "request body must be a JSON object")
            self._raise_if_invalid()

        for name in self.payload:
            if name not in PAYLOAD_FIELDS:
                self._add_issue(name, "unknown_field", "is not an allowed field")

        raw_movements = self._read_array("movements")
        raw_balances = self._read_array("balances")

        movements: List[Movement] = []
        for i, record in enumerate(raw_movements or []):
            movement = self._build_movement(record, f"movements[{i}]", strict=True)
            if movement is not None:
                movements.append(movement)

        checkpoints: List[Checkpoint] = []
        for i, record in enumerate(raw_balances or []):
            checkpoint = self._build_checkpoint(record, f"balances[{i}]", strict=True)
            if checkpoint is not None:
                checkpoints.append(checkpoint)

        if raw_balances is not None:
            self._check_limits(len(raw_movements or []), len(raw_balances))

        if self._validation_issues:
            logger.warning(f"Rejected payload with {len(self._validation_issues)} issue(s)")
        self._raise_if_invalid()

        self._movements = movements
        self._checkpoints = checkpoints
        return movements, checkpoints

    def _read_array(self, name: str) -> Optional[List[Any]]:
        if name not in self.payload:
            self._add_issue(name, "missing_field", "is required")
            return None

        value = self.payload[name]
        if not isinstance(value, list):
            self._add_issue(name, "not_an_array", "must be an array")
            return None
        return value
