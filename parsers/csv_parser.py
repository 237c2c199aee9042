"""
CSV Parser for movement and balance files.

Reads two files:
- movements: header row with id, date, label, amount
- balances:  header row with date, balance

Header names are matched case-insensitively; blank lines are skipped.
"""
import csv
from typing import Dict, List, Optional, Tuple

from config import FILE_ENCODINGS
from parsers.base_parser import BaseParser, Checkpoint, InvalidInputError, Movement, ValidationIssue


class CSVParser(BaseParser):
    """
    Parser for a pair of CSV files.

    Cell values are text, so ids and amounts are converted leniently
    ("1,250.00" is a valid amount). Row numbers in reported issues are
    1-based file lines, the header being line 1.
    """

    def __init__(self, movements_path: str, balances_path: str):
        """
        Initialize the CSV parser.

        Args:
            movements_path: Path to the movements CSV file
            balances_path: Path to the balances CSV file
        """
        super().__init__()
        self.movements_path = movements_path
        self.balances_path = balances_path
        self._encoding: Optional[str] = None

    def parse(self) -> Tuple[List[Movement], List[Checkpoint]]:
        self._validation_issues = []
        print(f"Parsing CSV files: {self.movements_path}, {self.balances_path}")

        movement_rows = self._read_csv(self.movements_path)
        balance_rows = self._read_csv(self.balances_path)

        movements: List[Movement] = []
        for line, record in movement_rows:
            movement = self._build_movement(record, f"movements[{line}]", strict=False, row_number=line)
            if movement is not None:
                movements.append(movement)

        checkpoints: List[Checkpoint] = []
        for line, record in balance_rows:
            checkpoint = self._build_checkpoint(record, f"balances[{line}]", strict=False, row_number=line)
            if checkpoint is not None:
                checkpoints.append(checkpoint)

        self._check_limits(len(movement_rows), len(balance_rows))
        self._raise_if_invalid()

        print(f"Extracted {len(movements)} movements and {len(checkpoints)} balances")
        self._movements = movements
        self._checkpoints = checkpoints
        return movements, checkpoints

    def _read_csv(self, filepath: str) -> List[Tuple[int, Dict[str, str]]]:
        """
        Read a CSV file with encoding fallback.

        Returns:
            List of (line number, row dict with lower-cased header keys)
        """
        for encoding in FILE_ENCODINGS:
            try:
                with open(filepath, 'r', encoding=encoding, newline='') as f:
                    reader = csv.DictReader(f)
                    rows = []
                    for line, row in enumerate(reader, 2):
                        if not any((v or '').strip() for v in row.values() if isinstance(v, str)):
                            continue
                        rows.append((line, {
                            (k or '').strip().lower(): v
                            for k, v in row.items()
                            if k is not None
                        }))
                self._encoding = encoding
                return rows
            except UnicodeDecodeError:
                continue

        raise InvalidInputError([ValidationIssue(
            path=filepath,
            issue_type="unreadable_file",
            message=f"could not decode with any of {', '.join(FILE_ENCODINGS)}",
        )])
