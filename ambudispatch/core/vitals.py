import random
from datetime import datetime
from typing import Dict, Iterator, Optional, Tuple

from ambudispatch.core.numeric import clamp, round_half_up, round_half_up_to
from ambudispatch.models.schemas import BloodPressure, VitalAssessment, VitalSigns

_default_rng = random.Random()

Range = Tuple[float, float]

BASELINE_RANGES: Dict[str, Range] = {
    "heart_rate": (70, 85),
    "systolic": (110, 130),
    "diastolic": (70, 85),
    "oxygen_saturation": (96, 99),
    "temperature": (36.5, 37.2),
    "respiratory_rate": (14, 18),
    "glucose_level": (80, 110),
}

# makin parah, makin jauh dari rentang normal
SEVERITY_RANGES: Dict[str, Dict[str, Range]] = {
    "Critical": {
        "heart_rate": (120, 150),
        "systolic": (160, 180),
        "diastolic": (95, 110),
        "oxygen_saturation": (85, 92),
        "temperature": (38.5, 40.0),
        "respiratory_rate": (25, 35),
        "glucose_level": (150, 200),
    },
    "High": {
        "heart_rate": (100, 120),
        "systolic": (140, 160),
        "diastolic": (90, 100),
        "oxygen_saturation": (92, 95),
        "temperature": (37.8, 38.5),
        "respiratory_rate": (20, 25),
        "glucose_level": (120, 150),
    },
    "Moderate": {
        "heart_rate": (85, 100),
        "systolic": (130, 145),
        "diastolic": (85, 95),
        "oxygen_saturation": (94, 97),
        "temperature": (37.3, 37.8),
        "respiratory_rate": (18, 22),
        "glucose_level": (100, 120),
    },
}

# batas fisiologis keras setelah perubahan acak
CLAMP_BOUNDS: Dict[str, Range] = {
    "heart_rate": (40, 180),
    "systolic": (80, 200),
    "diastolic": (50, 120),
    "oxygen_saturation": (70, 100),
    "temperature": (35, 42),
    "respiratory_rate": (10, 40),
    "glucose_level": (50, 300),
}


def _random_in_range(rng: random.Random, low: float, high: float, decimals: int = 0):
    value = rng.uniform(low, high)
    if decimals > 0:
        return round_half_up_to(value, decimals)
    return round_half_up(value)


def _sample(ranges: Dict[str, Range], rng: random.Random) -> VitalSigns:
    return VitalSigns(
        heart_rate=_random_in_range(rng, *ranges["heart_rate"]),
        blood_pressure=BloodPressure(
            systolic=_random_in_range(rng, *ranges["systolic"]),
            diastolic=_random_in_range(rng, *ranges["diastolic"]),
        ),
        oxygen_saturation=_random_in_range(rng, *ranges["oxygen_saturation"]),
        temperature=_random_in_range(rng, *ranges["temperature"], decimals=1),
        respiratory_rate=_random_in_range(rng, *ranges["respiratory_rate"]),
        glucose_level=_random_in_range(rng, *ranges["glucose_level"]),
        timestamp=datetime.utcnow(),
    )


def generate_baseline(rng: Optional[random.Random] = None) -> VitalSigns:
    """Tanda vital orang sehat, tiap field diambil acak dari rentang normalnya."""
    return _sample(BASELINE_RANGES, rng or _default_rng)


def generate_by_severity(severity: str, rng: Optional[random.Random] = None) -> VitalSigns:
    """
    Tanda vital awal sesuai tingkat keparahan.
    Low atau severity yang tidak dikenal → baseline.
    """
    ranges = SEVERITY_RANGES.get(severity)
    if ranges is None:
        return generate_baseline(rng)
    return _sample(ranges, rng or _default_rng)


def _variance_for(severity: str) -> int:
    if severity == "Critical":
        return 5
    if severity == "High":
        return 3
    return 2


def _step(rng: random.Random, current, delta, field: str, decimals: int = 0):
    low, high = CLAMP_BOUNDS[field]
    return clamp(current + _random_in_range(rng, -delta, delta, decimals), low, high)


def simulate_change(
    current: VitalSigns,
    severity: str,
    rng: Optional[random.Random] = None,
) -> VitalSigns:
    """
    Satu tick feed vital: perubahan acak simetris dari sampel sebelumnya,
    lalu di-clamp ke batas fisiologis. Random walk yang selalu terbatas.
    """
    rng = rng or _default_rng
    variance = _variance_for(severity)
    bp = current.blood_pressure

    glucose = None
    if current.glucose_level is not None:
        glucose = _step(rng, current.glucose_level, 5, "glucose_level")

    return VitalSigns(
        heart_rate=_step(rng, current.heart_rate, variance, "heart_rate"),
        blood_pressure=BloodPressure(
            systolic=_step(rng, bp.systolic, variance, "systolic"),
            diastolic=_step(rng, bp.diastolic, variance, "diastolic"),
        ),
        oxygen_saturation=_step(rng, current.oxygen_saturation, 1, "oxygen_saturation"),
        temperature=round_half_up_to(_step(rng, current.temperature, 0.2, "temperature", decimals=1), 1),
        respiratory_rate=_step(rng, current.respiratory_rate, 2, "respiratory_rate"),
        glucose_level=glucose,
        timestamp=datetime.utcnow(),
    )


def simulate_feed(
    initial: VitalSigns,
    severity: str,
    ticks: int,
    rng: Optional[random.Random] = None,
) -> Iterator[VitalSigns]:
    """Urutan `ticks` sampel berturut-turut, tiap sampel dari sampel sebelumnya."""
    current = initial
    for _ in range(max(0, ticks)):
        current = simulate_change(current, severity, rng)
        yield current


def is_abnormal(vitals: VitalSigns) -> VitalAssessment:
    abnormalities = []
    bp = vitals.blood_pressure

    if vitals.heart_rate < 60: abnormalities.append("Bradycardia (Low Heart Rate)")
    if vitals.heart_rate > 100: abnormalities.append("Tachycardia (High Heart Rate)")

    if bp.systolic > 140: abnormalities.append("High Systolic BP")
    if bp.systolic < 90: abnormalities.append("Low Systolic BP")
    if bp.diastolic > 90: abnormalities.append("High Diastolic BP")
    if bp.diastolic < 60: abnormalities.append("Low Diastolic BP")

    if vitals.oxygen_saturation < 95: abnormalities.append("Low Oxygen Saturation")

    if vitals.temperature > 37.5: abnormalities.append("Fever")
    if vitals.temperature < 36: abnormalities.append("Hypothermia")

    if vitals.respiratory_rate > 20: abnormalities.append("Tachypnea (Rapid Breathing)")
    if vitals.respiratory_rate < 12: abnormalities.append("Bradypnea (Slow Breathing)")

    if vitals.glucose_level is not None:
        if vitals.glucose_level > 140: abnormalities.append("Hyperglycemia (High Blood Sugar)")
        if vitals.glucose_level < 70: abnormalities.append("Hypoglycemia (Low Blood Sugar)")

    return VitalAssessment(is_abnormal=bool(abnormalities), abnormalities=abnormalities)


def get_status_color(vitals: VitalSigns) -> str:
    count = len(is_abnormal(vitals).abnormalities)
    if count == 0:
        return "green"
    if count <= 2:
        return "yellow"
    return "red"
