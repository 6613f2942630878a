import random

import pytest

from conftest import EdgeRng
from ambudispatch.models.schemas import BloodPressure
from ambudispatch.core.vitals import (
    BASELINE_RANGES,
    CLAMP_BOUNDS,
    SEVERITY_RANGES,
    generate_baseline,
    generate_by_severity,
    get_status_color,
    is_abnormal,
    simulate_change,
    simulate_feed,
)


def _fields(v):
    return {
        "heart_rate": v.heart_rate,
        "systolic": v.blood_pressure.systolic,
        "diastolic": v.blood_pressure.diastolic,
        "oxygen_saturation": v.oxygen_saturation,
        "temperature": v.temperature,
        "respiratory_rate": v.respiratory_rate,
        "glucose_level": v.glucose_level,
    }


def _assert_within(v, ranges):
    for field, value in _fields(v).items():
        low, high = ranges[field]
        assert low <= value <= high, field


def test_baseline_within_normal_ranges():
    rng = random.Random(7)
    for _ in range(200):
        _assert_within(generate_baseline(rng), BASELINE_RANGES)


@pytest.mark.parametrize("severity", ["Critical", "High", "Moderate"])
def test_generate_by_severity_within_tier(severity):
    rng = random.Random(11)
    for _ in range(200):
        _assert_within(generate_by_severity(severity, rng), SEVERITY_RANGES[severity])


def test_critical_oxygen_saturation_range():
    rng = random.Random(3)
    for _ in range(500):
        assert 85 <= generate_by_severity("Critical", rng).oxygen_saturation <= 92


@pytest.mark.parametrize("severity", ["Low", "Unknown", ""])
def test_low_or_unknown_severity_falls_back_to_baseline(severity):
    rng = random.Random(5)
    for _ in range(100):
        _assert_within(generate_by_severity(severity, rng), BASELINE_RANGES)


def test_generation_is_reproducible_with_same_seed():
    a = generate_by_severity("High", random.Random(99))
    b = generate_by_severity("High", random.Random(99))
    assert _fields(a) == _fields(b)


def test_temperature_has_one_decimal():
    rng = random.Random(21)
    for _ in range(50):
        t = generate_by_severity("Moderate", rng).temperature
        assert round(t, 1) == t


def test_range_edges_are_reachable():
    top = generate_by_severity("Critical", EdgeRng(high=True))
    bottom = generate_by_severity("Critical", EdgeRng(high=False))
    assert top.heart_rate == 150 and bottom.heart_rate == 120
    assert top.oxygen_saturation == 92 and bottom.oxygen_saturation == 85
    assert top.temperature == 40.0 and bottom.temperature == 38.5


def test_simulate_change_clamps_upper_bound(normal_vitals):
    current = normal_vitals.model_copy(update={"heart_rate": 179, "temperature": 41.9})
    nxt = simulate_change(current, "Critical", EdgeRng(high=True))
    assert nxt.heart_rate == 180
    assert nxt.temperature == 42


def test_simulate_change_clamps_out_of_range_input(normal_vitals):
    current = normal_vitals.model_copy(
        update={
            "heart_rate": 250,
            "blood_pressure": BloodPressure(systolic=10, diastolic=300),
            "oxygen_saturation": 40,
            "glucose_level": 1000,
        }
    )
    nxt = simulate_change(current, "Critical", EdgeRng(high=False))
    assert nxt.heart_rate == 180
    assert nxt.blood_pressure.systolic == 80
    assert nxt.blood_pressure.diastolic == 120
    assert nxt.oxygen_saturation == 70
    assert nxt.glucose_level == 300


@pytest.mark.parametrize("severity,variance", [("Critical", 5), ("High", 3), ("Moderate", 2), ("Low", 2)])
def test_simulate_change_variance_by_severity(normal_vitals, severity, variance):
    up = simulate_change(normal_vitals, severity, EdgeRng(high=True))
    down = simulate_change(normal_vitals, severity, EdgeRng(high=False))
    assert up.heart_rate == 75 + variance
    assert down.heart_rate == 75 - variance
    assert up.blood_pressure.systolic == 120 + variance
    assert up.oxygen_saturation == 99
    assert up.respiratory_rate == 18
    assert up.glucose_level == 105
    assert up.temperature == 37.0


def test_simulate_change_keeps_missing_glucose(normal_vitals):
    current = normal_vitals.model_copy(update={"glucose_level": None})
    assert simulate_change(current, "High", random.Random(1)).glucose_level is None


def test_random_walk_stays_bounded(normal_vitals):
    rng = random.Random(42)
    samples = list(simulate_feed(normal_vitals, "Critical", 2000, rng))
    assert len(samples) == 2000
    for v in samples:
        _assert_within(v, CLAMP_BOUNDS)


def test_is_abnormal_normal_vitals(normal_vitals):
    result = is_abnormal(normal_vitals)
    assert result.is_abnormal is False
    assert result.abnormalities == []


def test_is_abnormal_tachycardia_only(normal_vitals):
    result = is_abnormal(normal_vitals.model_copy(update={"heart_rate": 110}))
    assert result.is_abnormal is True
    assert result.abnormalities == ["Tachycardia (High Heart Rate)"]


def test_is_abnormal_fixed_order(normal_vitals):
    vitals = normal_vitals.model_copy(
        update={
            "heart_rate": 50,
            "blood_pressure": BloodPressure(systolic=150, diastolic=55),
            "oxygen_saturation": 90,
            "temperature": 35.5,
            "respiratory_rate": 25,
            "glucose_level": 60,
        }
    )
    assert is_abnormal(vitals).abnormalities == [
        "Bradycardia (Low Heart Rate)",
        "High Systolic BP",
        "Low Diastolic BP",
        "Low Oxygen Saturation",
        "Hypothermia",
        "Tachypnea (Rapid Breathing)",
        "Hypoglycemia (Low Blood Sugar)",
    ]


def test_is_abnormal_ignores_missing_glucose(normal_vitals):
    assert is_abnormal(normal_vitals.model_copy(update={"glucose_level": None})).abnormalities == []


def test_status_color_bands(normal_vitals):
    assert get_status_color(normal_vitals) == "green"
    assert get_status_color(normal_vitals.model_copy(update={"heart_rate": 110})) == "yellow"
    assert get_status_color(
        normal_vitals.model_copy(update={"heart_rate": 110, "temperature": 38.0})
    ) == "yellow"
    assert get_status_color(
        normal_vitals.model_copy(update={"heart_rate": 110, "temperature": 38.0, "oxygen_saturation": 90})
    ) == "red"


class FixedRng:
    def __init__(self, value):
        self.value = value

    def uniform(self, a, b):
        return self.value


def test_decimal_fields_round_half_up_like_integers():
    # 36.25 → 36.3 (round() bawaan memberi 36.2); 36.5 → 37 untuk field integer
    v = generate_baseline(FixedRng(36.25))
    assert v.temperature == 36.3
    assert v.heart_rate == 36

    assert generate_baseline(FixedRng(36.5)).heart_rate == 37


def test_tick_temperature_rounds_half_up(normal_vitals):
    # delta 0.25 → 0.3 (bukan 0.2), 36.8 + 0.3 = 37.1
    nxt = simulate_change(normal_vitals, "Low", FixedRng(0.25))
    assert nxt.temperature == 37.1
    assert nxt.heart_rate == normal_vitals.heart_rate
