"""
Market-data seam: quote records, source envelopes and per-currency curves.

The three external sources (rate futures, interest-rate swaps,
government bond yields) are fetched and cached outside this package.
They hand over SourceResponse envelopes; this module turns them into
observations and builds one curve per currency, independently:
a failure for one currency is recorded on its CurrencyCurve and never
affects the others.

Major currencies (USD, EUR, GBP, CHF, JPY) are built from IRS + futures,
the rest from the best-rated country's government bond yields.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date
from typing import Dict, Generic, List, Optional, Sequence, TypeVar, Union

from .curves.bootstrap import BootstrapConfig, CurveBootstrapper, CurveResult
from .curves.methods import CurveMethod
from .curves.observations import (
    RateObservation,
    normalize_bond,
    normalize_futures,
    normalize_swap,
)
from .exceptions import CurveError

logger = logging.getLogger(__name__)


T = TypeVar('T')


@dataclass(frozen=True)
class FuturesQuote:
    """Rate futures row: display price and maturity label."""
    latest: str
    maturity: str


@dataclass(frozen=True)
class SwapQuote:
    """IRS row: tenor in years and par rate in percent."""
    tenor: float
    rate_value: float


@dataclass(frozen=True)
class BondYield:
    """Government bond row: maturity in years and yield in percent (may be missing)."""
    maturity_years: float
    yield_value: Optional[float]


@dataclass(frozen=True)
class CountryBonds:
    """A country publishing a government yield curve."""
    country: str
    country_slug: str
    currency: str
    rating: Optional[str] = None


@dataclass(frozen=True)
class SourceResponse(Generic[T]):
    """
    Success/failure envelope returned by a market-data source.

    Attributes:
        success: Whether the fetch succeeded
        data: Rows when successful
        error: Error message when not
    """
    success: bool
    data: Optional[Sequence[T]] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Sequence[T]) -> "SourceResponse[T]":
        return cls(success=True, data=tuple(data))

    @classmethod
    def failed(cls, error: str) -> "SourceResponse[T]":
        return cls(success=False, error=error)

    @property
    def rows(self) -> Sequence[T]:
        """Rows of a successful response, empty otherwise."""
        if self.success and self.data:
            return self.data
        return ()


@dataclass(frozen=True)
class CurrencyConfig:
    """Default data sources per currency."""
    currency: str
    name: str
    default_futures_index: str
    default_irs_currency: str
    description: str


CURRENCY_CONFIGS: List[CurrencyConfig] = [
    CurrencyConfig("EUR", "Euro", "estr3m", "eur", "ESTR 3M + EUR IRS (ACT/360, Annual)"),
    CurrencyConfig("USD", "US Dollar", "sofr", "usd", "SOFR 3M + USD IRS (ACT/360, Semi-Annual)"),
    CurrencyConfig("GBP", "British Pound", "sonia", "gbp", "SONIA 3M + GBP IRS (ACT/365, Semi-Annual)"),
    CurrencyConfig("CHF", "Swiss Franc", "saron3m", "chf", "SARON 3M + CHF IRS (ACT/360, Annual)"),
    CurrencyConfig("JPY", "Japanese Yen", "tona3m", "jpy", "TONA 3M + JPY IRS (ACT/365, Semi-Annual)"),
    CurrencyConfig("CAD", "Canadian Dollar", "corra3m", "usd", "CORRA 3M + USD IRS fallback (ACT/365, Semi-Annual)"),
    CurrencyConfig("SGD", "Singapore Dollar", "sora3m", "usd", "SORA 3M + USD IRS fallback (ACT/365, Semi-Annual)"),
]

# Currencies curved from IRS + futures; everything else uses government bonds
IRS_FUTURES_CURRENCIES = ("USD", "EUR", "GBP", "CHF", "JPY")

DEFAULT_FUTURES_INDEX = "estr3m"
DEFAULT_IRS_CURRENCY = "eur"


def get_currency_config(currency: str) -> Optional[CurrencyConfig]:
    """Configured sources for a currency, or None."""
    for config in CURRENCY_CONFIGS:
        if config.currency == currency:
            return config
    return None


def get_defaults_for_currency(currency: str) -> Dict[str, str]:
    """Futures index and IRS currency to fetch for a currency (EUR sources by default)."""
    config = get_currency_config(currency)
    if config:
        return {"futures_index": config.default_futures_index, "irs_currency": config.default_irs_currency}
    return {"futures_index": DEFAULT_FUTURES_INDEX, "irs_currency": DEFAULT_IRS_CURRENCY}


def futures_observations(
    response: Optional[SourceResponse[FuturesQuote]],
    as_of: Optional[date] = None
) -> List[RateObservation]:
    """Normalized futures observations of a response; bad rows are dropped."""
    if response is None:
        return []
    observations = []
    for quote in response.rows:
        obs = normalize_futures(quote.latest, quote.maturity, as_of)
        if obs is not None:
            observations.append(obs)
    return observations


def swap_observations(response: Optional[SourceResponse[SwapQuote]]) -> List[RateObservation]:
    """Normalized swap observations of a response; bad rows are dropped."""
    if response is None:
        return []
    observations = []
    for quote in response.rows:
        obs = normalize_swap(quote.tenor, quote.rate_value)
        if obs is not None:
            observations.append(obs)
    return observations


def bond_observations(response: Optional[SourceResponse[BondYield]]) -> List[RateObservation]:
    """Normalized bond observations of a response; missing yields are dropped."""
    if response is None:
        return []
    observations = []
    for row in response.rows:
        obs = normalize_bond(row.maturity_years, row.yield_value)
        if obs is not None:
            observations.append(obs)
    return observations


def bond_currencies(countries: Sequence[CountryBonds]) -> List[str]:
    """Sorted currencies with bond data and no IRS/futures coverage."""
    return sorted({c.currency for c in countries if c.currency not in IRS_FUTURES_CURRENCIES})


def select_bond_country(countries: Sequence[CountryBonds], currency: str) -> Optional[CountryBonds]:
    """
    Pick the country whose bonds define a currency's curve.

    Rated countries come first, then by rating string; ties keep input order.
    """
    candidates = [c for c in countries if c.currency == currency]
    if not candidates:
        return None
    # sorted() is stable, so equal keys keep their input order
    ranked = sorted(candidates, key=lambda c: (c.rating is None, c.rating or ""))
    return ranked[0]


@dataclass(frozen=True)
class CurrencyCurve:
    """
    Outcome of building one currency's curve.

    ``result`` is None when no curve is available; ``error`` then holds
    the reason if construction failed rather than lacked data.
    """
    currency: str
    source: str
    source_name: str
    result: Optional[CurveResult]
    input_count: int
    error: Optional[str] = None

    @property
    def has_curve(self) -> bool:
        return self.result is not None


@dataclass(frozen=True)
class CurveRequest:
    """Inputs for one currency's curve."""
    currency: str
    futures: Optional[SourceResponse[FuturesQuote]] = None
    swaps: Optional[SourceResponse[SwapQuote]] = None
    bonds: Optional[SourceResponse[BondYield]] = None
    country: Optional[str] = None
    as_of: Optional[date] = None


def build_currency_curve(
    currency: str,
    method: Union[str, CurveMethod],
    *,
    futures: Optional[SourceResponse[FuturesQuote]] = None,
    swaps: Optional[SourceResponse[SwapQuote]] = None,
    bonds: Optional[SourceResponse[BondYield]] = None,
    country: Optional[str] = None,
    as_of: Optional[date] = None,
    config: Optional[BootstrapConfig] = None
) -> CurrencyCurve:
    """
    Build one currency's curve from source envelopes.

    IRS + futures are used when either is supplied, otherwise bonds.
    Curve errors are caught, logged and stored on the returned
    CurrencyCurve; an unknown method is still raised since it is a
    configuration error shared by every currency.
    """
    method = CurveMethod.from_string(method)
    bootstrapper = CurveBootstrapper(config)

    if futures is not None or swaps is not None:
        source, source_name = "irs_futures", "IRS + Futures"
        point_sets = [swap_observations(swaps), futures_observations(futures, as_of)]
    else:
        source, source_name = "bonds", f"Gov Bonds ({country or currency})"
        point_sets = [bond_observations(bonds)]

    input_count = sum(len(points) for points in point_sets)
    result, error = None, None

    if input_count >= 2:
        try:
            result = bootstrapper.bootstrap_points(point_sets, method, currency)
        except CurveError as e:
            logger.warning("No %s curve with %s: %s", currency, method.value, e)
            error = str(e)

    return CurrencyCurve(
        currency=currency,
        source=source,
        source_name=source_name,
        result=result,
        input_count=input_count,
        error=error,
    )


def build_all_curves(
    requests: Sequence[CurveRequest],
    method: Union[str, CurveMethod],
    config: Optional[BootstrapConfig] = None,
    max_workers: int = 1
) -> List[CurrencyCurve]:
    """
    Build curves for many currencies.

    Each currency is computed independently; with ``max_workers`` > 1
    they run on a thread pool. Results keep the request order.
    """
    method = CurveMethod.from_string(method)

    def build(request: CurveRequest) -> CurrencyCurve:
        return build_currency_curve(
            request.currency,
            method,
            futures=request.futures,
            swaps=request.swaps,
            bonds=request.bonds,
            country=request.country,
            as_of=request.as_of,
            config=config,
        )

    if max_workers <= 1:
        return [build(r) for r in requests]

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(build, requests))


__all__ = [
    "FuturesQuote",
    "SwapQuote",
    "BondYield",
    "CountryBonds",
    "SourceResponse",
    "CurrencyConfig",
    "CURRENCY_CONFIGS",
    "IRS_FUTURES_CURRENCIES",
    "get_currency_config",
    "get_defaults_for_currency",
    "futures_observations",
    "swap_observations",
    "bond_observations",
    "bond_currencies",
    "select_bond_country",
    "CurrencyCurve",
    "CurveRequest",
    "build_currency_curve",
    "build_all_curves",
]
