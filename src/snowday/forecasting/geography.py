"""Regional preparedness model.

Everything here is a pure function of average annual snowfall (and, for the
melt factor, temperature). Regions that see little snow close schools at lower
accumulations and take longer to recover.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from scipy.special import expit

# Snowfall (in/yr) at which preparedness is 0.5, and the sigmoid scale
_PREPAREDNESS_CENTER_IN = 30.0
_PREPAREDNESS_SCALE_IN = 10.0

# Latitude fallback: centre and slope of the latitude sigmoid expressed in
# snowfall units, so both paths agree on preparedness.
_LATITUDE_CENTER = 40.5
_SNOWFALL_PER_DEGREE = _PREPAREDNESS_SCALE_IN * 2.2 / 6.0

# (upper preparedness bound, typical closure days)
_CLOSURE_DAY_BANDS: list[tuple[float, int]] = [
    (0.20, 4),
    (0.40, 3),
    (0.65, 2),
    (0.85, 2),
]


def preparedness_index(avg_annual_snowfall: float) -> float:
    """Snow-response capacity in [0, 1]; 0.5 at 30 in/yr."""
    x = (avg_annual_snowfall - _PREPAREDNESS_CENTER_IN) / _PREPAREDNESS_SCALE_IN
    return float(np.clip(expit(x), 0.0, 1.0))


def closure_threshold_inches(avg_annual_snowfall: float) -> float:
    """Effective snow depth at which a closure becomes the expected outcome."""
    threshold = 1.0 + avg_annual_snowfall / 7.5
    if avg_annual_snowfall > 50:
        threshold += (avg_annual_snowfall - 50) * 0.5
    return threshold


def typical_closure_days(preparedness: float) -> int:
    """How many days an unremarkable event keeps schools affected."""
    for upper, days in _CLOSURE_DAY_BANDS:
        if preparedness < upper:
            return days
    return 1


def aftermath_decay_rate(preparedness: float) -> float:
    """Per-day decay of the snow aftermath tail; faster where crews are ready."""
    return 0.30 + 0.40 * preparedness


def melt_factor(temp_f: float) -> float:
    """Fraction of residual snow/ice cleared by above-freezing temperatures."""
    if temp_f <= 32:
        return 0.0
    return min(0.60, 0.03 * (temp_f - 32))


def snowfall_from_latitude(latitude: float) -> float:
    """Rough average annual snowfall for a US latitude."""
    return max(0.0, _PREPAREDNESS_CENTER_IN + _SNOWFALL_PER_DEGREE * (latitude - _LATITUDE_CENTER))


@dataclass(frozen=True)
class GeographyContext:
    """Location and climate inputs for one request.

    Attributes:
        state: two-letter state code (informational)
        latitude: degrees north
        longitude: degrees east
        avg_annual_snowfall: average annual snowfall in inches
    """

    state: str
    latitude: float
    longitude: float
    avg_annual_snowfall: float

    @classmethod
    def from_latitude(cls, state: str, latitude: float, longitude: float) -> GeographyContext:
        """Build a context when only coordinates are known."""
        return cls(
            state=state,
            latitude=latitude,
            longitude=longitude,
            avg_annual_snowfall=snowfall_from_latitude(latitude),
        )

    @property
    def is_populated(self) -> bool:
        values = (self.latitude, self.longitude, self.avg_annual_snowfall)
        return all(math.isfinite(v) for v in values) and self.avg_annual_snowfall >= 0

    @property
    def preparedness_index(self) -> float:
        return preparedness_index(self.avg_annual_snowfall)

    @property
    def closure_threshold_inches(self) -> float:
        return closure_threshold_inches(self.avg_annual_snowfall)

    @property
    def typical_closure_days(self) -> int:
        return typical_closure_days(self.preparedness_index)

    @property
    def aftermath_decay_rate(self) -> float:
        return aftermath_decay_rate(self.preparedness_index)

    def melt_factor(self, temp_f: float) -> float:
        return melt_factor(temp_f)
