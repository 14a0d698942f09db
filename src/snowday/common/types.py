"""Shared type aliases and unit helpers."""

from __future__ import annotations

from typing import TypeAlias

import numpy as np

# JSON-like dict
JsonDict: TypeAlias = dict[str, object]

# Upper bound for any closure or delay percentage
MAX_PCT = 95

# Inches of snow one inch of ice counts as
ICE_WEIGHT = 3.0


def celsius_to_fahrenheit(c: float) -> float:
    """Convert Celsius to Fahrenheit."""
    return c * 9.0 / 5.0 + 32.0


def mm_to_inches(mm: float) -> float:
    return mm / 25.4


def cm_to_inches(cm: float) -> float:
    return cm / 2.54


def m_to_inches(m: float) -> float:
    return m * 39.3701


def clamp_pct(value: float) -> int:
    """Round a percentage and clamp it to [0, MAX_PCT]."""
    return int(round(float(np.clip(value, 0.0, MAX_PCT))))


def precip_fraction(precip_pct: float | None) -> float:
    """Precipitation probability as a confidence multiplier; 0.0 when unknown."""
    if precip_pct is None:
        return 0.0
    return min(1.0, max(0.0, precip_pct / 100.0))
