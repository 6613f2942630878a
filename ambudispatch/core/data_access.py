# ambudispatch/core/data_access.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError as SchemaError
from sqlalchemy import text
from sqlalchemy.engine import Engine

from ambudispatch.core.config import extract_directory
from ambudispatch.core.directory import generate_hospitals
from ambudispatch.core.validate import ValidationError, validate_hospitals
from ambudispatch.db import get_engine
from ambudispatch.models.schemas import Hospital

logger = logging.getLogger(__name__)


# =========================
# RAW TABLE LOADERS
# =========================

def load_hospitals_df(db_engine: Optional[Engine] = None) -> pd.DataFrame:
    """
    Mengambil data RS dari tabel hospitals dan mengembalikan pandas DataFrame.

    Kolom:
      - id, name, lon, lat, address, contact_number
      - primary_specialization, specializations (array / teks dipisah koma)
      - rating, response_time
      - has_ambulance, has_emergency_room, has_24x7_service
      - facilities (array / teks dipisah koma)
      - general_total, general_available, icu_total, icu_available,
        emergency_total, emergency_available
    """
    if db_engine is None:
        db_engine = get_engine()

    query = """
        SELECT
            id, name, lon, lat, address, contact_number,
            primary_specialization, specializations,
            rating, response_time,
            has_ambulance, has_emergency_room, has_24x7_service,
            facilities,
            general_total, general_available,
            icu_total, icu_available,
            emergency_total, emergency_available
        FROM hospitals
        ORDER BY id
    """
    df = pd.read_sql(text(query), db_engine)

    numeric_cols = [
        "lon", "lat", "rating", "response_time",
        "general_total", "general_available",
        "icu_total", "icu_available",
        "emergency_total", "emergency_available",
    ]
    for col in numeric_cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce")

    return df


def load_doctors_df(db_engine: Optional[Engine] = None) -> pd.DataFrame:
    if db_engine is None:
        db_engine = get_engine()

    query = """
        SELECT hospital_id, specialization, total, available, on_call
        FROM hospital_doctors
        ORDER BY hospital_id
    """
    df = pd.read_sql(text(query), db_engine)
    for col in ["total", "available", "on_call"]:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).astype(int)
    return df


def load_blood_bank_df(db_engine: Optional[Engine] = None) -> pd.DataFrame:
    if db_engine is None:
        db_engine = get_engine()

    query = """
        SELECT hospital_id, blood_type, units
        FROM hospital_blood_bank
        ORDER BY hospital_id
    """
    df = pd.read_sql(text(query), db_engine)
    df["units"] = pd.to_numeric(df["units"], errors="coerce").fillna(0).astype(int)
    return df


# =========================
# DATAFRAME -> MODEL
# =========================

def _split_list(value: Any) -> List[str]:
    """
    Kolom list bisa berupa:
    - list ['Cardiac', 'Emergency']  (hasil dari Postgres array)
    - string "Cardiac, Emergency"
    """
    if isinstance(value, (list, tuple)):
        return [str(s).strip() for s in value if str(s).strip()]
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return []
    return [s.strip() for s in str(value).split(",") if s.strip()]


def _int(row: Any, col: str) -> int:
    value = row.get(col)
    return 0 if value is None or pd.isna(value) else int(value)


def _records_by_hospital(df: pd.DataFrame) -> Dict[str, List[Dict[str, Any]]]:
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for rec in df.to_dict(orient="records"):
        hid = str(rec.pop("hospital_id"))
        grouped.setdefault(hid, []).append(rec)
    return grouped


def hospitals_from_frames(
    hospitals_df: pd.DataFrame,
    doctors_df: pd.DataFrame,
    blood_df: pd.DataFrame,
) -> List[Hospital]:
    doctors = _records_by_hospital(doctors_df)
    blood = _records_by_hospital(blood_df)

    out: List[Hospital] = []
    errors: List[str] = []
    for _, row in hospitals_df.iterrows():
        hid = str(row["id"])
        try:
            hospital = Hospital(
                id=hid,
                name=str(row.get("name") or ""),
                coordinates=(float(row["lon"]), float(row["lat"])),
                address=str(row.get("address") or ""),
                contact_number=str(row.get("contact_number") or ""),
                primary_specialization=row["primary_specialization"],
                specializations=_split_list(row.get("specializations")),
                rating=float(row.get("rating") or 0.0),
                beds={
                    "general": {"total": _int(row, "general_total"), "available": _int(row, "general_available")},
                    "icu": {"total": _int(row, "icu_total"), "available": _int(row, "icu_available")},
                    "emergency": {"total": _int(row, "emergency_total"), "available": _int(row, "emergency_available")},
                },
                doctors=doctors.get(hid, []),
                facilities=_split_list(row.get("facilities")),
                blood_bank=blood.get(hid, []),
                response_time=float(row.get("response_time") or 0.0),
                has_ambulance=bool(row.get("has_ambulance")),
                has_emergency_room=bool(row.get("has_emergency_room")),
                has_24x7_service=bool(row.get("has_24x7_service")),
            )
        except SchemaError as e:
            # baris DB yang melanggar schema (angka negatif, rating > 5, dst)
            for err in e.errors():
                loc = ".".join(str(p) for p in err["loc"])
                errors.append(f"{hid}: {loc} {err['msg']}")
            continue
        out.append(hospital)

    if errors:
        raise ValidationError("; ".join(errors))
    return out


# =========================
# MAIN LOADER
# =========================

def load_hospitals(
    db_engine: Optional[Engine] = None,
    specialization: Optional[str] = None,
) -> List[Hospital]:
    """
    Direktori RS dari database, sudah divalidasi.
    - specialization: hanya RS yang punya spesialisasi ini (opsional)
    """
    if db_engine is None:
        db_engine = get_engine()

    hospitals = hospitals_from_frames(
        load_hospitals_df(db_engine),
        load_doctors_df(db_engine),
        load_blood_bank_df(db_engine),
    )
    validate_hospitals(hospitals)

    if specialization:
        hospitals = [h for h in hospitals if specialization in h.specializations]
    return hospitals


def load_directory(
    config: Optional[Dict[str, Any]] = None,
    center: Optional[Tuple[float, float]] = None,
    specialization: Optional[str] = None,
    db_engine: Optional[Engine] = None,
) -> List[Hospital]:
    """
    Loader utama yang dipanggil endpoints.
    directory.source:
      - seed     : direktori demo di sekitar `center` (default dari config)
      - database : tabel hospitals / hospital_doctors / hospital_blood_bank
    """
    source, default_center = extract_directory(config)

    if source == "database":
        return load_hospitals(db_engine=db_engine, specialization=specialization)

    if source != "seed":
        logger.warning("directory.source %r tidak dikenal, memakai seed", source)

    hospitals = generate_hospitals(center or default_center)
    if specialization:
        hospitals = [h for h in hospitals if specialization in h.specializations]
    return hospitals
