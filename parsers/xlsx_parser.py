"""
XLSX Parser for workbooks holding both movements and balances.
"""
from typing import Any, Dict, List, Tuple

import pandas as pd

from config import BALANCES_SHEET, MOVEMENTS_SHEET
from parsers.base_parser import BaseParser, Checkpoint, InvalidInputError, Movement, ValidationIssue


class XLSXParser(BaseParser):
    """
    Parser for XLSX files with a "Movements" and a "Balances" sheet.
    """

    def __init__(
        self,
        filepath: str,
        movements_sheet: str = MOVEMENTS_SHEET,
        balances_sheet: str = BALANCES_SHEET
    ):
        """
        Initialize the XLSX parser.

        Args:
            filepath: Path to the Excel file
            movements_sheet: Name of the sheet listing movements
            balances_sheet: Name of the sheet listing balance checkpoints
        """
        super().__init__()
        self.filepath = filepath
        self.movements_sheet = movements_sheet
        self.balances_sheet = balances_sheet

    def parse(self) -> Tuple[List[Movement], List[Checkpoint]]:
        self._validation_issues = []
        print(f"Parsing XLSX file: {self.filepath}")

        sheets = self._read_sheets()
        movement_rows = self._records(sheets[self.movements_sheet])
        balance_rows = self._records(sheets[self.balances_sheet])

        movements: List[Movement] = []
        for row, record in movement_rows:
            movement = self._build_movement(
                record, f"{self.movements_sheet}[{row}]", strict=False, row_number=row
            )
            if movement is not None:
                movements.append(movement)

        checkpoints: List[Checkpoint] = []
        for row, record in balance_rows:
            checkpoint = self._build_checkpoint(
                record, f"{self.balances_sheet}[{row}]", strict=False, row_number=row
            )
            if checkpoint is not None:
                checkpoints.append(checkpoint)

        self._check_limits(len(movement_rows), len(balance_rows))
        self._raise_if_invalid()

        print(f"Extracted {len(movements)} movements and {len(checkpoints)} balances")
        self._movements = movements
        self._checkpoints = checkpoints
        return movements, checkpoints

    def _read_sheets(self) -> Dict[str, pd.DataFrame]:
        """Read both sheets as text, reporting any that are absent."""
        with pd.ExcelFile(self.filepath) as xl:
            missing = [
                name for name in (self.movements_sheet, self.balances_sheet)
                if name not in xl.sheet_names
            ]
            if missing:
                raise InvalidInputError([
                    ValidationIssue(path=name, issue_type="missing_sheet",
                                    message=f"sheet not found in {self.filepath}")
                    for name in missing
                ])

            return {
                name: pd.read_excel(xl, sheet_name=name, dtype=str)
                for name in (self.movements_sheet, self.balances_sheet)
            }

    def _records(self, df: pd.DataFrame) -> List[Tuple[int, Dict[str, Any]]]:
        """
        Convert a sheet into (spreadsheet row number, record) pairs.

        Headers are lower-cased and trimmed; fully empty rows are dropped.
        """
        df = df.dropna(how='all')
        df.columns = [str(c).strip().lower() for c in df.columns]

        records = []
        for idx, row in df.iterrows():
            record = {
                col: (None if pd.isna(value) else value)
                for col, value in row.items()
                if not col.startswith('unnamed')
            }
            # Header occupies spreadsheet row 1
            records.append((int(idx) + 2, record))
        return records
