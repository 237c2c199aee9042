"""
Report writers for validation runs.
"""
from .excel_generator import generate_report_excel

__all__ = ['generate_report_excel']
