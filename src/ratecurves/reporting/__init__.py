"""
Reporting module for curve results.

Provides:
- CSV export of discount factors and zero rates
- DataFrame view of a curve
"""

from .curve_export import (
    CSV_COLUMNS,
    CsvPrecision,
    curve_to_frame,
    export_to_csv,
    csv_filename,
    write_csv,
)


__all__ = [
    "CSV_COLUMNS",
    "CsvPrecision",
    "curve_to_frame",
    "export_to_csv",
    "csv_filename",
    "write_csv",
]
