"""
Curve export.

Serializes a CurveResult to flat CSV text:

    tenor,discountFactor,zeroRate
    0.2500,0.98691567,5.300000
    ...

Rows are in ascending tenor order with fixed precision per column.
Triggering a download or writing a file is left to the caller, except
for the write_csv convenience helper.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

import pandas as pd

from ..curves.bootstrap import CurveResult


CSV_COLUMNS = ["tenor", "discountFactor", "zeroRate"]


@dataclass(frozen=True)
class CsvPrecision:
    """Decimal places per exported column."""
    tenor: int = 4
    discount_factor: int = 8
    zero_rate: int = 6


def curve_to_frame(result: CurveResult) -> pd.DataFrame:
    """Discount points of a result as a DataFrame, ascending by tenor."""
    return result.to_frame().sort_values("tenor", kind="stable").reset_index(drop=True)


def export_to_csv(result: CurveResult, precision: CsvPrecision = CsvPrecision()) -> str:
    """
    Export a curve to CSV text.

    Args:
        result: Curve to export
        precision: Decimal places per column

    Returns:
        CSV text: header plus one line per discount point
    """
    df = curve_to_frame(result)

    formatted = pd.DataFrame({
        "tenor": df["tenor"].map(lambda v: f"{v:.{precision.tenor}f}"),
        "discountFactor": df["discountFactor"].map(lambda v: f"{v:.{precision.discount_factor}f}"),
        "zeroRate": df["zeroRate"].map(lambda v: f"{v:.{precision.zero_rate}f}"),
    }, columns=CSV_COLUMNS)

    return formatted.to_csv(index=False, lineterminator="\n")


def csv_filename(result: CurveResult) -> str:
    """Download file name for a curve."""
    return f"all_curves_{result.currency}_{result.method.value}.csv"


def write_csv(
    result: CurveResult,
    output_dir: Union[str, Path],
    precision: CsvPrecision = CsvPrecision()
) -> str:
    """
    Write a curve CSV into a directory.

    Creates the directory if needed.

    Returns:
        Path of the created file
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    filename = output_path / csv_filename(result)
    filename.write_text(export_to_csv(result, precision), encoding="utf-8")
    return str(filename)


__all__ = [
    "CSV_COLUMNS",
    "CsvPrecision",
    "curve_to_frame",
    "export_to_csv",
    "csv_filename",
    "write_csv",
]
