#!/usr/bin/env python
"""
RateCurves Demo Script

This script demonstrates the curve construction workflow:
1. Normalize sample futures, swap and government bond quotes
2. Build one curve per currency with the selected method
3. Compare all six methods on the USD curve
4. Export each curve to CSV

Usage:
    python run_demo.py [--method METHOD] [--output-dir OUTPUT_DIR] [--workers N]
"""

import argparse
import logging
from datetime import date
from pathlib import Path

import pandas as pd

from ratecurves import (
    BondYield,
    CurveMethod,
    CurveRequest,
    FuturesQuote,
    SourceResponse,
    SwapQuote,
    build_all_curves,
    write_csv,
)


VALUATION_DATE = date(2026, 1, 15)


def sample_requests() -> list:
    """Sample market snapshots for a few currencies."""
    usd_futures = SourceResponse.ok([
        FuturesQuote("96.32", "Mar 2026"),
        FuturesQuote("96.45", "Jun 2026"),
        FuturesQuote("96.58", "Sep 2026"),
        FuturesQuote("96.66s", "Dec 2026"),
    ])
    usd_swaps = SourceResponse.ok([
        SwapQuote(tenor, rate) for tenor, rate in
        [(1, 3.62), (2, 3.48), (3, 3.45), (5, 3.52), (7, 3.63), (10, 3.78), (20, 4.01), (30, 3.95)]
    ])
    eur_futures = SourceResponse.ok([
        FuturesQuote("98.02", "3M"),
        FuturesQuote("98.05", "6M"),
        FuturesQuote("98.04", "9M"),
    ])
    eur_swaps = SourceResponse.ok([
        SwapQuote(tenor, rate) for tenor, rate in
        [(1, 2.05), (2, 2.12), (5, 2.35), (10, 2.68), (30, 2.81)]
    ])
    mxn_bonds = SourceResponse.ok([
        BondYield(maturity, y) for maturity, y in
        [(0.25, 7.1), (1, 7.3), (3, None), (5, 8.4), (10, 8.9), (20, 9.2)]
    ])

    return [
        CurveRequest("USD", futures=usd_futures, swaps=usd_swaps, as_of=VALUATION_DATE),
        CurveRequest("EUR", futures=eur_futures, swaps=eur_swaps),
        CurveRequest("GBP", futures=SourceResponse.failed("HTTP 503"), swaps=SourceResponse.failed("HTTP 503")),
        CurveRequest("MXN", bonds=mxn_bonds, country="Mexico"),
    ]


def print_summary(curves) -> None:
    print("="*60)
    print("CURVE SUMMARY")
    print("="*60)
    for curve in curves:
        if not curve.has_curve:
            reason = curve.error or f"{curve.input_count} usable inputs"
            print(f"  {curve.currency}: no curve ({reason})")
            continue
        result = curve.result
        print(f"  {curve.currency}: {curve.source_name}, {result.convention.describe()}, "
              f"{len(result.discount_factors)} points to {result.max_tenor:.2f}Y, "
              f"10Y zero {result.zero_rate_at(10.0):.4f}%")


def compare_methods(request: CurveRequest) -> pd.DataFrame:
    """Zero rates (percent) of one currency under every method."""
    columns = {}
    for method in CurveMethod:
        curve = build_all_curves([request], method)[0]
        if curve.has_curve:
            frame = curve.result.to_frame().set_index("tenor")
            columns[method.display_name] = frame["zeroRate"]
    return pd.DataFrame(columns)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="RateCurves Demo")
    parser.add_argument(
        "--method",
        type=str,
        default=CurveMethod.QUANTLIB_LOG_LINEAR.value,
        help="Curve method (linear, cubic_spline, nelson_siegel, bloomberg, "
             "quantlib_log_linear, quantlib_log_cubic)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="./output",
        help="Output directory for CSV files"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Threads used to build currencies in parallel"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log dropped quotes and collisions"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    method = CurveMethod.from_string(args.method)
    output_dir = Path(args.output_dir)

    print("="*60)
    print("RATECURVES DEMO")
    print(f"Valuation Date: {VALUATION_DATE}")
    print(f"Method: {method.display_name}")
    print("="*60)

    requests = sample_requests()
    curves = build_all_curves(requests, method, max_workers=args.workers)
    print_summary(curves)

    print("\n" + "="*60)
    print("USD METHOD COMPARISON (zero rates, %)")
    print("="*60)
    print(compare_methods(requests[0]).round(4).to_string())

    print("\nExporting CSV files...")
    for curve in curves:
        if curve.has_curve:
            path = write_csv(curve.result, output_dir)
            print(f"  {path}")

    print("="*60)
    print("Done")
    print("="*60)


if __name__ == "__main__":
    main()
