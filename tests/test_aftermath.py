"""Tests for the aftermath (carry-over) model."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from snowday.common.types import clamp_pct
from snowday.forecasting.aftermath import (
    aftermath_horizon,
    cold_persists,
    evaluate_event,
    ratio_probability,
    score_aftermath,
    snow_delay,
)
from snowday.forecasting.ledger import WinterEvent
from snowday.weather.models import AlertSeverity, WeatherAlert

MON = date(2025, 1, 6)
TUE = MON + timedelta(days=1)
WED = MON + timedelta(days=2)


def _days(start: date, temps: list[float]) -> dict[date, float]:
    return {start + timedelta(days=i): t for i, t in enumerate(temps)}


@pytest.fixture
def ice_event():
    """4in effective (1.33in of ice) on Monday."""
    return WinterEvent(date=MON, effective_amount=4.0, is_ice_event=True, ice_inches=4.0 / 3.0)


@pytest.fixture
def snow_event():
    return WinterEvent(date=MON, effective_amount=6.0, is_ice_event=False, snow_inches=6.0)


class TestRatioSteps:
    @pytest.mark.parametrize(
        "ratio,expected",
        [(3.0, 98), (2.0, 95), (1.6, 85), (1.33, 70), (0.8, 50), (0.2, 30)],
    )
    def test_steps(self, ratio, expected):
        assert ratio_probability(ratio) == expected


class TestColdPersistence:
    def test_mostly_freezing(self):
        assert cold_persists(_days(MON, [30, 28, 31]), MON, WED)

    def test_thaw_breaks_it(self):
        assert not cold_persists(_days(MON, [30, 28, 40]), MON, WED)

    def test_unknown_days_ignored(self):
        assert cold_persists({MON: 25.0}, MON, WED)
        assert not cold_persists({}, MON, WED)


class TestIceDecay:
    def test_frozen_next_day_decays_slowly(self, ice_event, midatlantic_geo):
        score = score_aftermath(TUE, 28.0, {MON: ice_event}, _days(MON, [30, 28]), midatlantic_geo, [])
        assert score.is_aftermath
        assert score.days_since_event == 1
        assert score.closure == 85
        assert score.delay == 15

    def test_thaw_decays_fast_with_melt(self, ice_event, midatlantic_geo):
        temps = _days(MON, [30, 28, 40])
        score = score_aftermath(WED, 40.0, {MON: ice_event}, temps, midatlantic_geo, [])
        # 100 × 0.85 (frozen Tue) × 0.5 (thawing Wed) × (1 − 0.7 × 0.24)
        assert score.closure == 35
        assert score.days_since_event == 2

    def test_frozen_beats_thawed_same_day(self, ice_event, midatlantic_geo):
        frozen = score_aftermath(TUE, 28.0, {MON: ice_event}, _days(MON, [30, 28]), midatlantic_geo, [])
        thawed = score_aftermath(TUE, 40.0, {MON: ice_event}, _days(MON, [30, 40]), midatlantic_geo, [])
        assert frozen.closure > thawed.closure


class TestSnowDecay:
    def test_schedule_then_tail(self, snow_event, midatlantic_geo):
        temps = _days(MON, [20.0] * 8)
        closures = [
            score_aftermath(MON + timedelta(days=d), 20.0, {MON: snow_event}, temps, midatlantic_geo, []).closure
            for d in range(1, 7)
        ]
        assert closures[:3] == [95, 90, 70]
        assert closures[3] < 70
        assert closures[4] < closures[3]
        # cold stretches the horizon to 5 days, not 6
        assert closures[5] == 0

    def test_warm_day_shrinks_horizon(self, snow_event, midatlantic_geo):
        temps = _days(MON, [45.0] * 8)
        late = score_aftermath(MON + timedelta(days=5), 45.0, {MON: snow_event}, temps, midatlantic_geo, [])
        assert late.closure == 0

    def test_small_event_fades_after_one_day(self, midatlantic_geo):
        event = WinterEvent(date=MON, effective_amount=0.6, is_ice_event=False, keyword_only=True)
        temps = _days(MON, [30.0] * 4)
        day1 = evaluate_event(event, TUE, 30.0, temps, midatlantic_geo)
        day2 = evaluate_event(event, WED, 30.0, temps, midatlantic_geo)
        assert day1 is not None and day2 is not None
        assert day2.closure == pytest.approx(day1.closure / 8)

    def test_late_delay_capped(self):
        assert snow_delay(44, 4, 6.0) == 50
        assert snow_delay(10, 1, 8.0) == pytest.approx(10 * 0.9 * 1.2)


class TestLookback:
    def test_same_day_and_future_events_ignored(self, snow_event, midatlantic_geo):
        temps = _days(MON, [20.0] * 3)
        assert evaluate_event(snow_event, MON, 20.0, temps, midatlantic_geo) is None
        assert evaluate_event(snow_event, MON - timedelta(days=1), 20.0, temps, midatlantic_geo) is None

    def test_sticky_extends_horizon(self, midatlantic_geo):
        plain = WinterEvent(date=MON, effective_amount=4.0, is_ice_event=False)
        sticky = WinterEvent(date=MON, effective_amount=4.0, is_ice_event=False, sticky=True)
        assert aftermath_horizon(plain, midatlantic_geo, cold=False) == midatlantic_geo.typical_closure_days
        assert aftermath_horizon(sticky, midatlantic_geo, cold=False) >= midatlantic_geo.typical_closure_days
        assert 2 <= aftermath_horizon(sticky, midatlantic_geo, cold=True) <= 5


class TestNoStacking:
    def test_strongest_single_event_wins(self, midatlantic_geo):
        big = WinterEvent(date=MON, effective_amount=10.0, is_ice_event=False, snow_inches=10.0)
        small = WinterEvent(date=TUE, effective_amount=2.0, is_ice_event=False, snow_inches=2.0)
        target = MON + timedelta(days=3)
        temps = _days(MON, [25.0] * 5)
        ledger = {MON: big, TUE: small}

        a = evaluate_event(big, target, 25.0, temps, midatlantic_geo)
        b = evaluate_event(small, target, 25.0, temps, midatlantic_geo)
        score = score_aftermath(target, 25.0, ledger, temps, midatlantic_geo, [])

        assert score.closure == clamp_pct(max(a.closure, b.closure))
        assert score.closure < a.closure + b.closure
        assert score.days_since_event == 3


class TestAftermathAlerts:
    def test_bonus_only_while_alert_in_effect(self, snow_event, midatlantic_geo):
        alert = WeatherAlert(
            event="Winter Weather Advisory",
            severity=AlertSeverity.ADVISORY,
            onset=datetime(2025, 1, 5, 18),
            ends=datetime(2025, 1, 7, 6),
        )
        temps = _days(MON, [20.0] * 5)
        wed = score_aftermath(WED, 20.0, {MON: snow_event}, temps, midatlantic_geo, [alert])
        assert wed.closure == 90

        tue_event = WinterEvent(date=MON, effective_amount=2.0, is_ice_event=False, snow_inches=2.0)
        without = score_aftermath(TUE, 20.0, {MON: tue_event}, temps, midatlantic_geo, [])
        with_alert = score_aftermath(TUE, 20.0, {MON: tue_event}, temps, midatlantic_geo, [alert])
        assert with_alert.closure == min(95, without.closure + 15)

    def test_bounded(self, midatlantic_geo):
        event = WinterEvent(date=MON, effective_amount=30.0, is_ice_event=True, ice_inches=10.0)
        alert = WeatherAlert(
            event="Ice Storm Warning", severity=AlertSeverity.EXTREME,
            onset=datetime(2025, 1, 5), ends=datetime(2025, 1, 10),
        )
        score = score_aftermath(TUE, 10.0, {MON: event}, _days(MON, [10.0, 10.0]), midatlantic_geo, [alert])
        assert score.closure == 95
        assert 0 <= score.delay <= 95
