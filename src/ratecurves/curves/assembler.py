"""
Curve input assembly.

Fuses observations from several instrument classes (IRS + futures, or
bonds) into one ascending-tenor sequence with a single observation per
tenor.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np

from ..exceptions import InsufficientDataError
from .observations import RateObservation

logger = logging.getLogger(__name__)


# Tenors closer than one calendar day are treated as the same knot
DEFAULT_TENOR_TOLERANCE = 1.0 / 365.0


@dataclass(frozen=True)
class CurveInput:
    """
    Ordered curve input.

    Observations are strictly ascending by tenor, one per tenor.
    """
    observations: Tuple[RateObservation, ...]

    def __post_init__(self):
        tenors = [obs.tenor for obs in self.observations]
        if any(t1 >= t2 for t1, t2 in zip(tenors, tenors[1:])):
            raise ValueError("Curve input tenors must be strictly ascending")

    def __len__(self) -> int:
        return len(self.observations)

    def __iter__(self) -> Iterator[RateObservation]:
        return iter(self.observations)

    def __getitem__(self, idx: int) -> RateObservation:
        return self.observations[idx]

    @property
    def tenors(self) -> np.ndarray:
        return np.array([obs.tenor for obs in self.observations], dtype=np.float64)

    @property
    def rates(self) -> np.ndarray:
        return np.array([obs.rate for obs in self.observations], dtype=np.float64)

    @property
    def max_tenor(self) -> float:
        return self.observations[-1].tenor if self.observations else 0.0

    @classmethod
    def from_observations(cls, observations: Iterable[RateObservation]) -> "CurveInput":
        """Build from observations that are already unique by tenor (sorted here)."""
        return cls(tuple(sorted(observations, key=lambda o: o.tenor)))


def assemble(
    point_sets: Sequence[Sequence[RateObservation]],
    tenor_tolerance: float = DEFAULT_TENOR_TOLERANCE
) -> CurveInput:
    """
    Merge observation lists into a single curve input.

    Algorithm:
    1. Concatenate all lists, remembering first-seen order
    2. Sort by tenor (stable) and cluster tenors lying within
       ``tenor_tolerance`` of the cluster's first tenor
    3. Keep the lowest priority number per cluster, ties to first seen
    4. Return survivors ascending by tenor

    Winners keep their own tenor. Since a cluster is anchored at its
    first tenor, winners of two adjacent clusters can still lie less than
    ``tenor_tolerance`` apart (e.g. 5Y + 0.9 days and 5Y + 1.05 days with
    a cluster starting at 5Y); both are kept as distinct knots.

    Args:
        point_sets: Observation lists, e.g. [swap_points, futures_points]
        tenor_tolerance: Collision window in years (0 = exact match only)

    Returns:
        CurveInput

    Raises:
        InsufficientDataError: If fewer than 2 observations survive
    """
    if tenor_tolerance < 0:
        raise ValueError("Tenor tolerance must be non-negative")

    merged: List[Tuple[int, RateObservation]] = []
    for points in point_sets:
        for obs in points or ():
            merged.append((len(merged), obs))

    merged.sort(key=lambda item: item[1].tenor)

    survivors: List[RateObservation] = []
    cluster: List[Tuple[int, RateObservation]] = []

    def close_cluster():
        best = min(cluster, key=lambda item: (item[1].priority, item[0]))
        for _, dropped in cluster:
            if dropped is not best[1]:
                logger.debug(
                    "Tenor collision at %.4fY: keeping %s (priority %d), dropping %s (priority %d)",
                    best[1].tenor, best[1].source.value, best[1].priority,
                    dropped.source.value, dropped.priority
                )
        survivors.append(best[1])

    for item in merged:
        if cluster and item[1].tenor - cluster[0][1].tenor > tenor_tolerance:
            close_cluster()
            cluster = []
        cluster.append(item)
    if cluster:
        close_cluster()

    result = CurveInput.from_observations(survivors)

    if len(result) < 2:
        raise InsufficientDataError(
            f"Need at least 2 distinct-tenor observations, got {len(result)}"
        )
    return result


__all__ = [
    "CurveInput",
    "DEFAULT_TENOR_TOLERANCE",
    "assemble",
]
