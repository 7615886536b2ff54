"""
Statistical helpers used by the distribution, clustering and ranking charts
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from chartforge.config.settings import get_settings

_SQRT_2PI = math.sqrt(2 * math.pi)


@dataclass(frozen=True)
class FiveNumberSummary:
    min: float
    q1: float
    median: float
    q3: float
    max: float

    def as_dict(self) -> Dict[str, float]:
        return {"min": self.min, "q1": self.q1, "median": self.median, "q3": self.q3, "max": self.max}


def five_number_summary(values: Sequence[float]) -> FiveNumberSummary:
    """
    Box plot summary using index-based quantiles.

    q(p) = sorted[floor(n * p)] with no interpolation; max is the last
    element. An empty input yields all zeros.
    """
    if not values:
        return FiveNumberSummary(0.0, 0.0, 0.0, 0.0, 0.0)

    ordered = sorted(values)
    n = len(ordered)

    def quantile(p: float) -> float:
        return ordered[min(int(math.floor(n * p)), n - 1)]

    return FiveNumberSummary(
        min=ordered[0],
        q1=quantile(0.25),
        median=quantile(0.5),
        q3=quantile(0.75),
        max=ordered[-1],
    )


def kernel_density(values: Sequence[float], steps: Optional[int] = None) -> List[Dict[str, float]]:
    """
    Gaussian kernel density estimate over [min, max].

    Bandwidth is (max - min) / 20, evaluated at steps + 1 evenly spaced
    points. Only values within one bandwidth of a point contribute, and the
    sum is normalised by n * bandwidth * sqrt(2*pi). A single distinct value
    has no spread and returns one point at that value with density 1.
    """
    if not values:
        return []
    if steps is None:
        steps = get_settings().kde_steps

    low = min(values)
    high = max(values)
    if high == low:
        return [{"x": low, "y": 1.0}]

    bandwidth = (high - low) / 20
    step = (high - low) / steps
    n = len(values)
    points = []
    for i in range(steps + 1):
        x = low + i * step
        density = 0.0
        for value in values:
            if abs(x - value) <= bandwidth:
                u = (x - value) / bandwidth
                density += math.exp(-0.5 * u * u)
        points.append({"x": x, "y": density / (n * bandwidth * _SQRT_2PI)})
    return points


@dataclass(frozen=True)
class HistogramBin:
    start: float
    end: float
    count: int

    @property
    def label(self) -> str:
        return f"{self.start:.1f}-{self.end:.1f}"


def histogram_bins(values: Sequence[float], bins: int) -> List[HistogramBin]:
    """
    Equal-width bins across [min, max]; the maximum lands in the last bin.
    """
    if not values:
        return []
    bins = max(1, int(bins))
    low = min(values)
    high = max(values)
    width = (high - low) / bins

    counts = [0] * bins
    for value in values:
        if width == 0:
            index = 0
        else:
            index = min(int((value - low) / width), bins - 1)
        counts[index] += 1

    return [
        HistogramBin(start=low + i * width, end=low + (i + 1) * width, count=counts[i])
        for i in range(bins)
    ]


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def distance_matrix(vectors: Sequence[Sequence[float]]) -> List[List[float]]:
    """Full pairwise Euclidean distance matrix"""
    return [[euclidean_distance(a, b) for b in vectors] for a in vectors]


def rank_descending(values: Dict[Any, float]) -> Dict[Any, int]:
    """
    Rank keys by value, 1 = highest.

    Ties keep the mapping's insertion order.
    """
    ordered = sorted(values.items(), key=lambda item: -item[1])
    return {key: position + 1 for position, (key, _) in enumerate(ordered)}


def normalise(value: float, low: float, high: float) -> float:
    """Position of value within [low, high] as 0..1 (0 when the range is empty)"""
    span = high - low
    if span == 0:
        return 0.0
    return (value - low) / span
