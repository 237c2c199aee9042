"""
Excel output generator for validation runs.

Creates a formatted Excel workbook with multiple sheets:
1. Summary
2. Periods
3. Reasons
4. Suspected Duplicates
"""
from datetime import date, datetime
from typing import List, Sequence

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows
from openpyxl.worksheet.worksheet import Worksheet

from config import APP_NAME, APP_VERSION, UNBOUNDED_PERIOD_START
from normalizer.amount_parser import amounts_equal, round_money
from reconciler.periods import Period
from reconciler.reasons import ValidationReasonType, ValidationResult


# Style definitions
HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
MISMATCH_FILL = PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid")
CURRENCY_FORMAT = '#,##0.00'
DATE_FORMAT = 'DD-MMM-YYYY'

PERIOD_COLUMNS = [
    "Period", "Start (exclusive)", "End (inclusive)", "Movements",
    "Opening Balance", "Movements Sum", "Calculated Balance",
    "Expected Balance", "Difference", "Status",
]
REASON_COLUMNS = ["Checkpoint Date", "Type", "Message"]
DUPLICATE_COLUMNS = ["Checkpoint Date", "Id", "Date", "Label", "Amount"]


def generate_report_excel(
    periods: Sequence[Period],
    result: ValidationResult,
    output_path: str
) -> str:
    """
    Generate an Excel workbook describing one validation run.

    Args:
        periods: Periods as derived by build_periods
        result: Validation result for the same input
        output_path: Path to save the Excel file

    Returns:
        Path to the generated file
    """
    print(f"\nGenerating Excel report: {output_path}")

    wb = Workbook()

    # Remove default sheet
    if 'Sheet' in wb.sheetnames:
        del wb['Sheet']

    _create_summary_sheet(wb, periods, result)
    _write_frame(wb.create_sheet("Periods"), periods_frame(periods))
    _write_frame(wb.create_sheet("Reasons"), reasons_frame(result))
    _write_frame(wb.create_sheet("Suspected Duplicates"), duplicates_frame(result))

    _highlight_mismatches(wb["Periods"])

    wb.save(output_path)
    print(f"Excel file saved: {output_path}")

    return output_path


def periods_frame(periods: Sequence[Period]) -> pd.DataFrame:
    """One row per period."""
    rows = []
    for period in periods:
        difference = round_money(period.calculated_balance - period.expected_balance)
        matched = amounts_equal(period.calculated_balance, period.expected_balance)
        rows.append([
            period.index + 1,
            UNBOUNDED_PERIOD_START if period.is_unbounded else period.start,
            period.end,
            len(period.movements),
            float(period.opening_balance),
            float(period.movements_sum),
            float(period.calculated_balance),
            float(period.expected_balance),
            float(difference),
            "OK" if matched else "MISMATCH",
        ])
    return pd.DataFrame(rows, columns=PERIOD_COLUMNS)


def reasons_frame(result: ValidationResult) -> pd.DataFrame:
    """One row per reason, in result order."""
    rows = [
        [reason.checkpoint_date, reason.type.value, reason.message]
        for reason in result.reasons
    ]
    return pd.DataFrame(rows, columns=REASON_COLUMNS)


def duplicates_frame(result: ValidationResult) -> pd.DataFrame:
    """One row per suspected duplicate movement."""
    rows = []
    for reason in result.reasons_of(ValidationReasonType.DUPLICATE_SUSPECTED):
        for movement in reason.movements:
            rows.append([
                reason.checkpoint_date,
                movement.id,
                movement.date,
                movement.label,
                float(movement.amount),
            ])
    return pd.DataFrame(rows, columns=DUPLICATE_COLUMNS)


def _write_frame(ws: Worksheet, df: pd.DataFrame) -> None:
    """Write a DataFrame with styled headers and formatted cells."""
    for row in dataframe_to_rows(df, index=False, header=True):
        ws.append(row)

    for cell in ws[1]:
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center')

    for row in ws.iter_rows(min_row=2):
        for cell in row:
            if isinstance(cell.value, float):
                cell.number_format = CURRENCY_FORMAT
            elif isinstance(cell.value, (date, datetime)):
                cell.number_format = DATE_FORMAT

    for col, header in enumerate(df.columns, 1):
        width = max([len(str(header))] + [len(str(v)) for v in df.iloc[:, col - 1]]) + 2
        ws.column_dimensions[get_column_letter(col)].width = min(width, 80)

    ws.freeze_panes = "A2"


def _highlight_mismatches(ws: Worksheet) -> None:
    status_col = PERIOD_COLUMNS.index("Status") + 1
    for row in ws.iter_rows(min_row=2):
        if row[status_col - 1].value == "MISMATCH":
            for cell in row:
                cell.fill = MISMATCH_FILL


def _create_summary_sheet(
    wb: Workbook,
    periods: Sequence[Period],
    result: ValidationResult
) -> None:
    """Create the Summary sheet."""
    ws = wb.create_sheet("Summary")

    movement_count = sum(len(p.movements) for p in periods)
    mismatches = len(result.reasons_of(ValidationReasonType.BALANCE_MISMATCH))

    stats: List[tuple] = [
        ("Validation Summary", ""),
        ("", ""),
        ("Status", "Accepted" if result.is_valid else "Validation failed"),
        ("Checkpoints", len(periods)),
        ("Movements in periods", movement_count),
        ("Mismatched periods", mismatches),
        ("Suspected duplicate reasons",
         len(result.reasons_of(ValidationReasonType.DUPLICATE_SUSPECTED))),
        ("Missing movement reasons",
         len(result.reasons_of(ValidationReasonType.MISSING_MOVEMENTS))),
        ("", ""),
        ("Generated by", f"{APP_NAME} v{APP_VERSION}"),
        ("Generated at", datetime.now().strftime('%Y-%m-%d %H:%M:%S')),
    ]

    for row_idx, (label, value) in enumerate(stats, 1):
        cell = ws.cell(row=row_idx, column=1, value=label)
        if label and value == "":
            cell.font = Font(bold=True, size=12)
        ws.cell(row=row_idx, column=2, value=value)

    ws.column_dimensions['A'].width = 30
    ws.column_dimensions['B'].width = 30
