"""Snow and ice amount extraction for forecast periods.

Each period is resolved by an ordered cascade of strategies:

1. Structured inches supplied by the forecast source (authoritative, even 0).
2. Regex over the forecast prose ("4 to 8 inches", "around 2 inches", feet).
3. Keyword estimate ("heavy snow", "snow likely", "freezing rain"),
   scaled by the precipitation probability.

The first strategy that returns a reading wins. Absence of signal resolves to
0 inches, never to a guess.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from snowday.common.types import ICE_WEIGHT
from snowday.weather.models import ForecastPeriod

logger = logging.getLogger(__name__)


class AmountSource(Enum):
    """Which tier of the cascade produced an amount."""

    STRUCTURED = "structured"
    REGEX_RANGE = "regex_range"
    REGEX_SINGLE = "regex_single"
    KEYWORD = "keyword"
    NONE = "none"


# Most authoritative first
_SOURCE_PRIORITY = [
    AmountSource.STRUCTURED,
    AmountSource.REGEX_RANGE,
    AmountSource.REGEX_SINGLE,
    AmountSource.KEYWORD,
    AmountSource.NONE,
]

_NUMERIC_SOURCES = frozenset(
    {AmountSource.STRUCTURED, AmountSource.REGEX_RANGE, AmountSource.REGEX_SINGLE}
)


@dataclass(frozen=True)
class AmountReading:
    """One resolved amount.

    ``low``/``high`` hold the parsed range for REGEX_RANGE readings; a reading
    from a "less than X" phrase has only ``high`` set.
    """

    inches: float
    source: AmountSource
    low: float | None = None
    high: float | None = None


NO_READING = AmountReading(0.0, AmountSource.NONE)


@dataclass(frozen=True)
class SnowIceAmounts:
    """Snow and ice resolved for a day (day period plus preceding night)."""

    snow_inches: float
    ice_inches: float
    snow_source: AmountSource
    ice_source: AmountSource
    display: str | None = None

    def effective(self, ice_weight: float = ICE_WEIGHT) -> float:
        return self.snow_inches + self.ice_inches * ice_weight

    @property
    def has_numeric_amount(self) -> bool:
        """True when a structured or regex tier produced either amount."""
        return self.snow_source in _NUMERIC_SOURCES or self.ice_source in _NUMERIC_SOURCES


Strategy = Callable[[ForecastPeriod], Optional[AmountReading]]

# --- Text normalisation ---

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?;])\s+")

_NUMBER_WORDS = {
    "one": "1", "two": "2", "three": "3", "four": "4", "five": "5", "six": "6",
    "seven": "7", "eight": "8", "nine": "9", "ten": "10", "eleven": "11", "twelve": "12",
}
_NUMBER_WORD_PATTERN = re.compile(r"\b(" + "|".join(_NUMBER_WORDS) + r")\b(?!\s+(?:tenth|quarter|half))")

_ICE_WORD_PATTERN = re.compile(r"\bice\b|freezing|glaze|sleet")

# --- Amount patterns ---

_UNIT = r"(inch(?:es)?|feet|foot|ft)\b"
_NUM = r"(\d+(?:\.\d+)?)"
_OF_AN = r"\s*(?:of\s+an?\s+)?"

_RANGE_PATTERN = re.compile(_NUM + r"\s*(?:to|-|–)\s*" + _NUM + _OF_AN + _UNIT)
_LESS_THAN_PATTERN = re.compile(r"less\s+than\s+" + _NUM + _OF_AN + _UNIT)
_SINGLE_PATTERN = re.compile(_NUM + _OF_AN + _UNIT)
_AROUND_AN_INCH = re.compile(r"(?:around|about|up\s+to)\s+an?\s+inch")

# A "less than X" bound resolves to this share of X
_LESS_THAN_SHARE = 0.6

# Fractional ice phrases, checked in order (bounded phrases first)
_ICE_FRACTION_PHRASES: list[tuple[re.Pattern[str], float, AmountSource]] = [
    (re.compile(r"less\s+than\s+(?:a|one)\s+tenth\s+of\s+an\s+inch"), 0.08, AmountSource.REGEX_SINGLE),
    (re.compile(r"less\s+than\s+(?:a|one)\s+quarter\s+of\s+an\s+inch"), 0.15, AmountSource.REGEX_SINGLE),
    (re.compile(r"less\s+than\s+(?:a\s+)?half\s+(?:an\s+)?inch"), 0.3, AmountSource.REGEX_SINGLE),
    (re.compile(r"(?:a|one)\s+tenth\s+(?:of\s+an\s+)?inch"), 0.1, AmountSource.REGEX_SINGLE),
    (re.compile(r"(?:a|one)\s+quarter\s+(?:of\s+an\s+)?inch"), 0.25, AmountSource.REGEX_SINGLE),
    (re.compile(r"half\s+(?:an\s+)?inch"), 0.5, AmountSource.REGEX_SINGLE),
]

_SNOW_LESS_THAN_HALF = re.compile(r"less\s+than\s+(?:a\s+)?half\s+(?:an\s+)?inch")

# --- Keyword tables ---

_HEAVY_SNOW = re.compile(r"heavy\s+snow|blizzard")
_SLIGHT_CHANCE = re.compile(r"slight\s+chance(?:\s+of)?\s+(?:light\s+)?snow")
_MODERATE_SNOW = re.compile(r"moderate\s+snow|snow(?:\s+showers)?\s+likely|likely\s+snow")
_LIGHT_SNOW = re.compile(r"light\s+snow|chance(?:\s+of)?\s+(?:light\s+)?snow")

_ICE_KEYWORDS: list[tuple[re.Pattern[str], float]] = [
    (re.compile(r"ice\s+storm"), 0.5),
    (re.compile(r"freezing\s+rain"), 0.25),
    (re.compile(r"freezing\s+drizzle"), 0.1),
    (re.compile(r"\bglaze\b"), 0.1),
]
_SLEET = re.compile(r"sleet|ice\s+pellets")
_NO_ICE_VETO = re.compile(r"(?:little\s+or\s+)?no\s+(?:significant\s+)?ice\s+accumulation")

# Ice keywords only count at or below this temperature (°F)
_ICE_MAX_TEMP_F = 38.0
_SLEET_ICE_EQUIVALENT = 0.08

# Low-confidence keyword table used to seed the event ledger
_LOW_CONFIDENCE_FACTOR = 0.5
_LOW_CONFIDENCE_SNOW: list[tuple[re.Pattern[str], float]] = [
    (_HEAVY_SNOW, 6.0),
    (_MODERATE_SNOW, 3.0),
    (_SLIGHT_CHANCE, 0.5),
    (re.compile(r"snow\s+showers"), 1.0),
    (_LIGHT_SNOW, 1.0),
    (re.compile(r"flurries"), 0.5),
    (re.compile(r"\bsnow\b"), 1.0),
]


def _normalise(text: str) -> str:
    lowered = text.lower()
    return _NUMBER_WORD_PATTERN.sub(lambda m: _NUMBER_WORDS[m.group(1)], lowered)


def _sentences(period: ForecastPeriod) -> list[str]:
    """Detailed then short forecast text split into lower-cased sentences."""
    out: list[str] = []
    for text in (period.detailed_forecast, period.short_forecast):
        if text:
            out.extend(s for s in _SENTENCE_SPLIT.split(_normalise(text)) if s)
    return out


def _to_inches(value: str, unit: str) -> float | None:
    try:
        amount = float(value)
    except ValueError:
        return None
    if unit in ("feet", "foot", "ft"):
        amount *= 12
    return amount


def _match_range(sentence: str) -> AmountReading | None:
    for m in _RANGE_PATTERN.finditer(sentence):
        low = _to_inches(m.group(1), m.group(3))
        high = _to_inches(m.group(2), m.group(3))
        if low is None or high is None:
            continue
        if high < low:
            low, high = high, low
        return AmountReading((low + high) / 2.0, AmountSource.REGEX_RANGE, low=low, high=high)
    return None


def _match_single(sentence: str) -> AmountReading | None:
    m = _LESS_THAN_PATTERN.search(sentence)
    if m:
        bound = _to_inches(m.group(1), m.group(2))
        if bound is not None:
            return AmountReading(bound * _LESS_THAN_SHARE, AmountSource.REGEX_SINGLE, high=bound)
    if _AROUND_AN_INCH.search(sentence):
        return AmountReading(1.0, AmountSource.REGEX_SINGLE)
    for m in _SINGLE_PATTERN.finditer(sentence):
        inches = _to_inches(m.group(1), m.group(2))
        if inches is not None:
            return AmountReading(inches, AmountSource.REGEX_SINGLE)
    return None


# --- Snow strategies ---


def _structured_snow(period: ForecastPeriod) -> AmountReading | None:
    if period.snowfall_inches is None:
        return None
    return AmountReading(max(0.0, period.snowfall_inches), AmountSource.STRUCTURED)


def _snow_sentences(period: ForecastPeriod) -> list[str]:
    return [s for s in _sentences(period) if "snow" in s]


def _regex_range_snow(period: ForecastPeriod) -> AmountReading | None:
    for sentence in _snow_sentences(period):
        reading = _match_range(sentence)
        if reading is not None:
            return reading
    return None


def _regex_single_snow(period: ForecastPeriod) -> AmountReading | None:
    for sentence in _snow_sentences(period):
        if _SNOW_LESS_THAN_HALF.search(sentence):
            return AmountReading(0.5 * _LESS_THAN_SHARE, AmountSource.REGEX_SINGLE, high=0.5)
        reading = _match_single(sentence)
        if reading is not None:
            return reading
    return None


def snow_keyword_inches(text: str) -> float | None:
    """Unscaled snow estimate from forecast wording, or None."""
    if _HEAVY_SNOW.search(text):
        return 6.0
    if _MODERATE_SNOW.search(text):
        return 3.0
    if _SLIGHT_CHANCE.search(text):
        return None
    if _LIGHT_SNOW.search(text):
        return 1.0
    return None


def _keyword_snow(period: ForecastPeriod) -> AmountReading | None:
    base = snow_keyword_inches(period.text)
    if base is None:
        return None
    return AmountReading(base * period.precip_fraction, AmountSource.KEYWORD)


_SNOW_STRATEGIES: list[Strategy] = [
    _structured_snow,
    _regex_range_snow,
    _regex_single_snow,
    _keyword_snow,
]

# --- Ice strategies ---


def _structured_ice(period: ForecastPeriod) -> AmountReading | None:
    if period.ice_inches is None:
        return None
    return AmountReading(max(0.0, period.ice_inches), AmountSource.STRUCTURED)


def _ice_sentences(period: ForecastPeriod) -> list[str]:
    return [
        s for s in _sentences(period)
        if _ICE_WORD_PATTERN.search(s) and "accumulation" in s and "snow" not in s
    ]


def _regex_range_ice(period: ForecastPeriod) -> AmountReading | None:
    for sentence in _ice_sentences(period):
        reading = _match_range(sentence)
        if reading is not None:
            return reading
    return None


def _regex_single_ice(period: ForecastPeriod) -> AmountReading | None:
    for sentence in _ice_sentences(period):
        for pattern, inches, source in _ICE_FRACTION_PHRASES:
            if pattern.search(sentence):
                return AmountReading(inches, source)
        reading = _match_single(sentence)
        if reading is not None:
            return reading
    return None


def ice_keyword_inches(text: str, temperature: float) -> float | None:
    """Unscaled ice estimate from forecast wording, or None.

    Needs explicit freezing-rain style wording and a temperature at or below
    38°F. "Little or no ice accumulation" vetoes the freezing-rain keywords;
    sleet/ice pellets are not vetoed.
    """
    if temperature > _ICE_MAX_TEMP_F:
        return None
    estimate: float | None = None
    if not _NO_ICE_VETO.search(text):
        for pattern, inches in _ICE_KEYWORDS:
            if pattern.search(text):
                estimate = inches
                break
    if _SLEET.search(text):
        estimate = max(estimate or 0.0, _SLEET_ICE_EQUIVALENT)
    return estimate


def _keyword_ice(period: ForecastPeriod) -> AmountReading | None:
    base = ice_keyword_inches(period.text, period.temperature)
    if base is None:
        return None
    return AmountReading(base * period.precip_fraction, AmountSource.KEYWORD)


_ICE_STRATEGIES: list[Strategy] = [
    _structured_ice,
    _regex_range_ice,
    _regex_single_ice,
    _keyword_ice,
]


def resolve(period: ForecastPeriod, strategies: list[Strategy]) -> AmountReading:
    """Run *strategies* in order and return the first reading found."""
    for strategy in strategies:
        reading = strategy(period)
        if reading is not None:
            logger.debug(
                "%s: %.2fin via %s", period.name, reading.inches, reading.source.value,
            )
            return reading
    return NO_READING


def resolve_snow(period: ForecastPeriod) -> AmountReading:
    return resolve(period, _SNOW_STRATEGIES)


def resolve_ice(period: ForecastPeriod) -> AmountReading:
    return resolve(period, _ICE_STRATEGIES)


def _best_source(readings: list[AmountReading]) -> AmountSource:
    return min(
        (r.source for r in readings),
        key=_SOURCE_PRIORITY.index,
        default=AmountSource.NONE,
    )


def _qualitative_display(text: str) -> str | None:
    if _HEAVY_SNOW.search(text):
        return "Heavy"
    if "snow showers" in text or "flurries" in text:
        return "Light"
    if "snow" in text and "chance" not in text:
        return "Moderate"
    return None


def _display(snow_readings: list[AmountReading], total: float, text: str) -> str | None:
    """Human-readable snowfall, e.g. '4-8"', '3.0"', '<1"' or 'Heavy'."""
    with_amount = [r for r in snow_readings if r.inches > 0]
    if len(with_amount) == 1:
        only = with_amount[0]
        if only.low is not None and only.high is not None:
            return f'{only.low:g}-{only.high:g}"'
        if only.high is not None:
            return f'<{only.high:g}"'
    if total >= 0.1:
        return f'{total:.1f}"'
    return _qualitative_display(text)


def extract_amounts(
    day: ForecastPeriod,
    night: ForecastPeriod | None = None,
) -> SnowIceAmounts:
    """Resolve snow and ice for a day period and the night before it."""
    periods = [p for p in (night, day) if p is not None]
    snow = [resolve_snow(p) for p in periods]
    ice = [resolve_ice(p) for p in periods]

    snow_total = sum(r.inches for r in snow)
    ice_total = sum(r.inches for r in ice)
    text = " ".join(p.text for p in periods)

    return SnowIceAmounts(
        snow_inches=snow_total,
        ice_inches=ice_total,
        snow_source=_best_source([r for r in snow if r.source is not AmountSource.NONE]),
        ice_source=_best_source([r for r in ice if r.source is not AmountSource.NONE]),
        display=_display(snow, snow_total, text),
    )


def estimate_keyword_only(
    day: ForecastPeriod | None,
    night: ForecastPeriod | None = None,
) -> tuple[float, float]:
    """Low-confidence (snow, ice) guess from wording alone.

    Used only to seed the event ledger when nothing firmer was found, so
    vague "chance of snow" days still leave a (quickly decaying) trace.
    Each period's guess is scaled by its own precipitation probability.
    """
    snow = 0.0
    ice = 0.0
    for period in (p for p in (night, day) if p is not None):
        text = period.text
        for pattern, inches in _LOW_CONFIDENCE_SNOW:
            if pattern.search(text):
                snow += inches * _LOW_CONFIDENCE_FACTOR * period.precip_fraction
                break
        ice_guess = ice_keyword_inches(text, period.temperature)
        if ice_guess is not None:
            ice += ice_guess * _LOW_CONFIDENCE_FACTOR * period.precip_fraction
    return snow, ice
