from __future__ import annotations

import random
from datetime import datetime

import pytest

from ambudispatch.models.schemas import Hospital, PatientData, VitalSigns

CENTER = (77.5946, 12.9716)


class EdgeRng:
    """uniform() selalu mengembalikan batas atas (high=True) atau bawah."""

    def __init__(self, high: bool):
        self.high = high

    def uniform(self, a, b):
        return b if self.high else a


class SequenceRng:
    """random() mengembalikan nilai dari daftar tetap, berulang."""

    def __init__(self, values):
        self.values = list(values)
        self.i = 0

    def random(self):
        value = self.values[self.i % len(self.values)]
        self.i += 1
        return value

    def randrange(self, n):
        return 0


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def hospital_factory():
    def make(**overrides) -> Hospital:
        data = dict(
            id="H-1",
            name="Test Hospital",
            coordinates=CENTER,
            primary_specialization="Cardiac",
            specializations=["Cardiac", "Emergency"],
            rating=4.0,
            beds={
                "general": {"total": 80, "available": 12},
                "icu": {"total": 20, "available": 3},
                "emergency": {"total": 15, "available": 5},
            },
            doctors=[{"specialization": "Cardiac", "total": 15, "available": 8, "on_call": 3}],
            facilities=["ECG"],
            blood_bank=[{"blood_type": "O+", "units": 25}],
            response_time=10,
            has_ambulance=True,
            has_emergency_room=False,
            has_24x7_service=False,
        )
        data.update(overrides)
        return Hospital(**data)

    return make


@pytest.fixture()
def patient_factory():
    def make(**overrides) -> PatientData:
        data = dict(
            symptoms=["chest pain"],
            severity="Critical",
            urgency=7,
            required_specialization=["Cardiac"],
        )
        data.update(overrides)
        return PatientData(**data)

    return make


@pytest.fixture()
def normal_vitals():
    return VitalSigns(
        heart_rate=75,
        blood_pressure={"systolic": 120, "diastolic": 80},
        oxygen_saturation=98,
        temperature=36.8,
        respiratory_rate=16,
        glucose_level=100,
        timestamp=datetime(2024, 1, 1, 12, 0, 0),
    )
