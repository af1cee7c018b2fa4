"""
Threshold Band Classification

Maps a scalar score or ratio onto an ordered category using a declarative
table of lower bounds. The classifier holds no domain constants; each
calculator supplies its own table (see band_tables).
"""

import math
from typing import List, Optional, Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Band:
    """One category in a band table."""

    label: str
    lower_bound: float = -math.inf
    color_tag: str = "neutral"
    interpretation: str = ""
    recommendations: List[str] = field(default_factory=list)


@dataclass
class Classification:
    """Category assigned to a value."""

    label: str
    color_tag: str
    interpretation: str
    recommendations: List[str]
    rank: int


class BandTable:
    """
    Ordered bands with an implicit catch-all floor.

    The floor band covers every value below the lowest explicit threshold, so
    classification is defined for all real numbers.
    """

    def __init__(self, floor: Band, bands: Sequence[Band] = ()):
        bounds = [band.lower_bound for band in bands]
        for lower, upper in zip(bounds, bounds[1:]):
            if not lower < upper:
                raise ValueError(
                    f"Band lower bounds must be strictly increasing: {lower} >= {upper}"
                )
        if any(math.isnan(b) or math.isinf(b) for b in bounds):
            raise ValueError("Band lower bounds must be finite")

        self.floor = floor
        self.bands = list(bands)

    @property
    def labels(self) -> List[str]:
        """Labels from lowest to highest rank."""
        return [self.floor.label] + [band.label for band in self.bands]

    def rank(self, label: str) -> int:
        """Ordinal position of a label; the floor band is 0."""
        try:
            return self.labels.index(label)
        except ValueError:
            raise ValueError(f"Unknown band label: {label}")

    def rank_of(self, value: float) -> int:
        """Rank of the band containing value, scanning from the top down."""
        for i in range(len(self.bands), 0, -1):
            if value >= self.bands[i - 1].lower_bound:
                return i
        return 0

    def band_at(self, rank: int) -> Band:
        return self.bands[rank - 1] if rank else self.floor


def classify(value: Optional[float], table: BandTable) -> Classification:
    """
    Classify a value against a band table.

    Bands are checked from the highest lower bound downward; the first one the
    value meets or exceeds wins, otherwise the floor band applies.

    Raises:
        ValueError: Value is missing or NaN
    """
    if value is None or math.isnan(value):
        raise ValueError("Cannot classify a missing or NaN value")

    rank = table.rank_of(value)
    band = table.band_at(rank)

    return Classification(
        label=band.label,
        color_tag=band.color_tag,
        interpretation=band.interpretation,
        recommendations=list(band.recommendations),
        rank=rank,
    )
