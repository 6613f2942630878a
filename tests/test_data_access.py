import json

import pandas as pd
import pytest
from sqlalchemy import create_engine

from conftest import CENTER
from ambudispatch.core.config import (
    DEFAULT_CENTER,
    DEFAULT_WEIGHTS,
    extract_directory,
    extract_routing,
    extract_weights,
    load_config,
)
from ambudispatch.core.data_access import load_directory, load_hospitals, load_hospitals_df
from ambudispatch.core.validate import ValidationError


def _seed_tables(engine, general_available=10, rating=4.8):
    hospitals = pd.DataFrame(
        [
            {
                "id": "DB-1", "name": "Harbor Cardiac", "lon": 77.60, "lat": 12.97,
                "address": "1 Harbor Rd", "contact_number": "+91-1",
                "primary_specialization": "Cardiac", "specializations": "Cardiac, Emergency",
                "rating": rating, "response_time": 6,
                "has_ambulance": 1, "has_emergency_room": 1, "has_24x7_service": 1,
                "facilities": "ECG, Cath Lab",
                "general_total": 50, "general_available": general_available,
                "icu_total": 10, "icu_available": 2,
                "emergency_total": 8, "emergency_available": 3,
            },
            {
                "id": "DB-2", "name": "Hillside Clinic", "lon": 77.58, "lat": 12.99,
                "address": "", "contact_number": "",
                "primary_specialization": "General", "specializations": "General",
                "rating": 3.9, "response_time": 14,
                "has_ambulance": 0, "has_emergency_room": 0, "has_24x7_service": 0,
                "facilities": None,
                "general_total": 20, "general_available": 4,
                "icu_total": 0, "icu_available": 0,
                "emergency_total": 2, "emergency_available": 1,
            },
        ]
    )
    doctors = pd.DataFrame(
        [
            {"hospital_id": "DB-1", "specialization": "Cardiac", "total": 6, "available": 3, "on_call": 1},
            {"hospital_id": "DB-1", "specialization": "Emergency", "total": 4, "available": 2, "on_call": 0},
        ]
    )
    blood = pd.DataFrame(
        [
            {"hospital_id": "DB-1", "blood_type": "O+", "units": 30},
            {"hospital_id": "DB-2", "blood_type": "A-", "units": 4},
        ]
    )
    hospitals.to_sql("hospitals", engine, index=False)
    doctors.to_sql("hospital_doctors", engine, index=False)
    blood.to_sql("hospital_blood_bank", engine, index=False)


@pytest.fixture()
def engine(tmp_path):
    eng = create_engine(f"sqlite:///{tmp_path / 'directory.db'}")
    yield eng
    eng.dispose()


def test_load_hospitals_df_columns(engine):
    _seed_tables(engine)
    df = load_hospitals_df(engine)
    assert list(df["id"]) == ["DB-1", "DB-2"]
    assert df["general_available"].tolist() == [10, 4]


def test_load_hospitals_builds_models(engine):
    _seed_tables(engine)
    hospitals = load_hospitals(db_engine=engine)
    assert [h.id for h in hospitals] == ["DB-1", "DB-2"]

    cardiac, clinic = hospitals
    assert cardiac.coordinates == (77.60, 12.97)
    assert cardiac.specializations == ["Cardiac", "Emergency"]
    assert cardiac.facilities == ["ECG", "Cath Lab"]
    assert cardiac.beds.icu.available == 2
    assert [d.specialization for d in cardiac.doctors] == ["Cardiac", "Emergency"]
    assert cardiac.doctors[0].on_call == 1
    assert cardiac.blood_bank[0].units == 30
    assert cardiac.has_24x7_service is True

    assert clinic.doctors == []
    assert clinic.facilities == []
    assert clinic.has_emergency_room is False


def test_load_hospitals_filter_by_specialization(engine):
    _seed_tables(engine)
    hospitals = load_hospitals(db_engine=engine, specialization="Emergency")
    assert [h.id for h in hospitals] == ["DB-1"]


def test_load_hospitals_validates(engine):
    _seed_tables(engine, general_available=60)
    with pytest.raises(ValidationError):
        load_hospitals(db_engine=engine)


def test_load_hospitals_reports_schema_violations(engine):
    _seed_tables(engine, rating=9.0)
    with pytest.raises(ValidationError, match="DB-1: rating"):
        load_hospitals(db_engine=engine)


def test_load_directory_sources(engine):
    _seed_tables(engine)
    assert len(load_directory({}, center=CENTER)) == 15
    assert len(load_directory({"directory": {"source": "seed"}}, specialization="Cardiac")) == 3
    db = load_directory({"directory": {"source": "database"}}, db_engine=engine)
    assert [h.id for h in db] == ["DB-1", "DB-2"]


def test_load_directory_database_without_url(monkeypatch):
    import ambudispatch.db as db

    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setattr(db, "_engine", None)
    with pytest.raises(RuntimeError, match="DATABASE_URL tidak diset"):
        load_directory({"directory": {"source": "database"}})


# =========================
# CONFIG
# =========================

def test_load_config_explicit_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.delenv("CONFIG_PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    assert load_config() == {}


def test_load_config_from_env(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"routing": {"timeout_s": 3}}), encoding="utf-8")
    monkeypatch.setenv("CONFIG_PATH", str(path))
    config = load_config()
    assert extract_routing(config)["timeout_s"] == 3.0


def test_extract_defaults():
    assert extract_weights(None) == DEFAULT_WEIGHTS
    routing = extract_routing({})
    assert routing["timeout_s"] == 10.0
    assert routing["max_workers"] == 8
    assert extract_directory({}) == ("seed", DEFAULT_CENTER)


def test_extract_partial_overrides():
    weights = extract_weights({"weights": {"beds": 0.5}})
    assert weights["beds"] == 0.5
    assert weights["specialization"] == 0.40
    assert extract_routing({"routing": {"max_workers": 0}})["max_workers"] == 1
    assert extract_directory({"directory": {"source": "DATABASE", "center": [1, 2]}}) == ("database", (1.0, 2.0))
