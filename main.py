#!/usr/bin/env python3
"""
Movement Validator - Command Line Entry Point

Checks that a ledger of movements explains a series of balance
checkpoints and, when it does not, reports suspected duplicates or
missing movements for each failing period.

Usage:
    python main.py --input <payload.json|workbook.xlsx> [options]
    python main.py --movements <movements.csv> --balances <balances.csv> [options]

Examples:
    python main.py --input request.json
    python main.py --input ledger.xlsx --output report.xlsx
    python main.py --movements movements.csv --balances balances.csv --json
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from parsers.base_parser import BaseParser, Checkpoint, InvalidInputError, Movement
from parsers.csv_parser import CSVParser
from parsers.payload_parser import PayloadParser
from parsers.xlsx_parser import XLSXParser
from output.excel_generator import generate_report_excel
from reconciler.balance_checker import MovementValidator
from reconciler.periods import build_periods

EXIT_ACCEPTED = 0
EXIT_ERROR = 1
EXIT_REJECTED = 2


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Validate a ledger of movements against balance checkpoints.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Input formats:
  JSON   {"movements": [{"id", "date", "label", "amount"}], "balances": [{"date", "balance"}]}
  XLSX   sheets "Movements" (id, date, label, amount) and "Balances" (date, balance)
  CSV    two files with the same columns as the sheets

Exit codes:
  0  movements accepted
  1  input or usage error
  2  validation failed
        """
    )

    parser.add_argument(
        '--input', '-i',
        default=None,
        help='Path to a JSON payload or XLSX workbook'
    )
    parser.add_argument(
        '--movements', '-m',
        default=None,
        help='Path to a movements CSV file (use with --balances)'
    )
    parser.add_argument(
        '--balances', '-b',
        default=None,
        help='Path to a balances CSV file (use with --movements)'
    )
    parser.add_argument(
        '--output', '-o',
        default=None,
        help='Write an Excel report to this path'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print the validation result as JSON'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    args = parser.parse_args(argv)

    if args.input and (args.movements or args.balances):
        parser.error("use either --input or --movements/--balances, not both")
    if not args.input and not (args.movements and args.balances):
        parser.error("provide --input, or both --movements and --balances")

    return args


def detect_file_type(filepath: str) -> str:
    """
    Detect input type from extension.

    Returns:
        'json' or 'xlsx'
    """
    ext = Path(filepath).suffix.lower()
    if ext == '.json':
        return 'json'
    elif ext in ('.xlsx', '.xlsm'):
        return 'xlsx'
    else:
        raise ValueError(f"Unknown file extension: {ext}. Expected .json or .xlsx")


def load_input(args: argparse.Namespace) -> Tuple[BaseParser, List[Movement], List[Checkpoint]]:
    """Build the right parser for the arguments and run it."""
    parser: BaseParser
    if args.input:
        if detect_file_type(args.input) == 'json':
            with open(args.input, 'r', encoding='utf-8') as f:
                payload = json.load(f)
            parser = PayloadParser(payload)
        else:
            parser = XLSXParser(args.input)
    else:
        parser = CSVParser(args.movements, args.balances)

    movements, checkpoints = parser.parse()
    return parser, movements, checkpoints


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    for path in filter(None, [args.input, args.movements, args.balances]):
        if not os.path.exists(path):
            print(f"Error: Input file not found: {path}")
            return EXIT_ERROR

    try:
        parser, movements, checkpoints = load_input(args)
    except InvalidInputError as e:
        print(f"Error: {len(e.issues)} input problem(s):")
        for issue in e.issues[:20]:
            rows = f" (row {', '.join(map(str, issue.row_numbers))})" if issue.row_numbers else ""
            print(f"  - {issue.path}: {issue.message}{rows}")
        if len(e.issues) > 20:
            print(f"  ... and {len(e.issues) - 20} more")
        return EXIT_ERROR
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    summary = parser.get_summary()
    if not args.json:
        print(f"\n--- Input Summary ---")
        print(f"Movements: {summary['total_movements']}")
        print(f"Checkpoints: {summary['total_checkpoints']}")
        print(f"Total inflows: {summary['total_inflows']:,.2f}")
        print(f"Total outflows: {summary['total_outflows']:,.2f}")
        if summary['date_range'][0]:
            print(f"Date range: {summary['date_range'][0]} to {summary['date_range'][1]}")

    validator = MovementValidator()
    result = validator.validate(movements, checkpoints)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif result.is_valid:
        print("\nAccepted: movements explain every balance checkpoint.")
    else:
        print(f"\nValidation failed ({len(result.reasons)} reason(s)):")
        for reason in result.reasons:
            print(f"  [{reason.type.value}] {reason.message}")
            for movement in getattr(reason, 'movements', ()):
                print(f"      #{movement.id} {movement.date} {movement.label!r} {movement.amount}")

    if args.output:
        generate_report_excel(build_periods(movements, checkpoints), result, args.output)

    return EXIT_ACCEPTED if result.is_valid else EXIT_REJECTED


if __name__ == "__main__":
    sys.exit(main())
