"""
Parsers for movement and balance input.
"""
from .base_parser import BaseParser, Checkpoint, InvalidInputError, Movement, ValidationIssue
from .payload_parser import PayloadParser
from .csv_parser import CSVParser
from .xlsx_parser import XLSXParser

__all__ = [
    'BaseParser', 'Checkpoint', 'InvalidInputError', 'Movement', 'ValidationIssue',
    'PayloadParser', 'CSVParser', 'XLSXParser',
]
