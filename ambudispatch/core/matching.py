import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ambudispatch.core.config import extract_routing, extract_weights
from ambudispatch.core.explain import build_match_reasons
from ambudispatch.core.numeric import clamp, round_half_up
from ambudispatch.core.routing import Route, RouteProvider, fallback_route, resolve_route
from ambudispatch.models.schemas import (
    AvailabilityStatus,
    BedPool,
    Hospital,
    HospitalMatch,
    PatientData,
)

logger = logging.getLogger(__name__)

LonLat = Tuple[float, float]

NEUTRAL_SCORE = 50.0
URGENCY_BOOST = 1.1
URGENCY_BOOST_THRESHOLD = 8


# =========================
# SUB-SKOR (masing-masing 0..100)
# =========================

def _pool_ratio(pool: BedPool) -> float:
    if pool.total <= 0:
        return 0.0
    return pool.available / pool.total * 100


def specialization_score(hospital: Hospital, required: Sequence[str]) -> float:
    """
    Persentase spesialisasi yang diminta dan dimiliki RS.
    Bonus 0.5 kalau spesialisasi itu juga spesialisasi utama RS.
    Tanpa permintaan spesialisasi → netral 50.
    """
    if not required:
        return NEUTRAL_SCORE

    matches = 0.0
    for spec in required:
        if spec in hospital.specializations:
            matches += 1
            if hospital.primary_specialization == spec:
                matches += 0.5

    return min(100.0, matches / len(required) * 100)


def bed_availability_score(hospital: Hospital, severity: str) -> float:
    """
    Critical → ICU, High → IGD (emergency), lainnya → bed umum.
    +10 kalau bed umum dan ICU sama-sama masih ada.
    """
    beds = hospital.beds

    if severity == "Critical":
        score = _pool_ratio(beds.icu)
    elif severity == "High":
        score = _pool_ratio(beds.emergency)
    else:
        score = _pool_ratio(beds.general)

    if beds.general.available > 0 and beds.icu.available > 0:
        score += 10

    return min(100.0, score)


def doctor_availability_score(hospital: Hospital, required: Sequence[str]) -> float:
    if not required:
        return NEUTRAL_SCORE

    total_score = 0.0
    matched = 0
    for spec in required:
        doctor = next((d for d in hospital.doctors if d.specialization == spec), None)
        if doctor is None:
            continue
        matched += 1
        if doctor.total > 0:
            total_score += doctor.available / doctor.total * 100

    if matched == 0:
        return 0.0
    return total_score / matched


def distance_score(distance_km: float) -> float:
    if distance_km <= 2:
        return 100.0
    if distance_km <= 5:
        return 80.0
    if distance_km <= 10:
        return 50.0
    return max(20.0, 100 - distance_km * 5)


def blood_availability_score(hospital: Hospital, blood_type_needed: Optional[str]) -> float:
    if not blood_type_needed:
        return 100.0

    stock = next((b for b in hospital.blood_bank if b.blood_type == blood_type_needed), None)
    if stock is None or stock.units <= 0:
        return 0.0
    if stock.units >= 20:
        return 100.0
    if stock.units >= 10:
        return 70.0
    return 40.0


# =========================
# SKOR TOTAL
# =========================

def calculate_match_score(
    hospital: Hospital,
    patient: PatientData,
    distance_km: float,
    weights: Optional[Dict[str, float]] = None,
) -> int:
    """
    Skor = jumlah berbobot sub-skor + bonus datar, lalu dikali 1.1
    (urgensi >= 8 dan RS utama Emergency), dibulatkan dan di-clamp ke 0..100.
    Multiplier berlaku ke seluruh skor termasuk bonus.
    """
    w = weights or extract_weights(None)
    required = patient.required_specialization

    score = 0.0
    score += specialization_score(hospital, required) * w["specialization"]
    score += bed_availability_score(hospital, patient.severity) * w["beds"]
    score += doctor_availability_score(hospital, required) * w["doctors"]
    score += distance_score(distance_km) * w["distance"]
    score += blood_availability_score(hospital, patient.blood_type_needed) * w["blood"]

    if hospital.has_24x7_service:
        score += 2
    if hospital.has_emergency_room:
        score += 3
    if hospital.rating >= 4.5:
        score += 2

    if patient.urgency >= URGENCY_BOOST_THRESHOLD and hospital.primary_specialization == "Emergency":
        score *= URGENCY_BOOST

    return clamp(round_half_up(score), 0, 100)


def check_availability(hospital: Hospital, patient: PatientData) -> AvailabilityStatus:
    beds = hospital.beds
    required = patient.required_specialization

    has_beds = beds.general.available > 0 or beds.icu.available > 0 or beds.emergency.available > 0
    has_doctors = any(
        d.specialization in required and d.available > 0 for d in hospital.doctors
    )
    has_blood = not patient.blood_type_needed or any(
        b.blood_type == patient.blood_type_needed and b.units > 0 for b in hospital.blood_bank
    )

    return AvailabilityStatus(
        beds=has_beds,
        doctors=has_doctors,
        blood=has_blood,
        facilities=len(hospital.facilities) > 0,
    )


def build_match(
    hospital: Hospital,
    patient: PatientData,
    route: Route,
    weights: Optional[Dict[str, float]] = None,
) -> HospitalMatch:
    return HospitalMatch(
        hospital=hospital,
        score=calculate_match_score(hospital, patient, route.distance_km, weights),
        distance=route.distance_km,
        eta=route.duration_minutes,
        match_reasons=build_match_reasons(hospital, patient),
        availability_status=check_availability(hospital, patient),
        route_source=route.source,
    )


# =========================
# ROUTE LOOKUP (fan-out / fan-in)
# =========================

def lookup_routes(
    hospitals: Sequence[Hospital],
    origin: LonLat,
    provider: Optional[RouteProvider],
    timeout_s: float = 10.0,
    max_workers: int = 8,
) -> List[Route]:
    """
    Satu lookup rute per RS, dijalankan paralel di thread pool terbatas.
    Hasil dikembalikan sesuai urutan `hospitals`, bukan urutan selesai.
    `timeout_s` adalah batas waktu untuk seluruh fan-out, bukan per RS:
    lookup yang belum selesai (atau belum sempat jalan) saat deadline → fallback haversine.
    """
    if provider is None or not hospitals:
        return [fallback_route(origin, h.coordinates) for h in hospitals]

    executor = ThreadPoolExecutor(max_workers=min(max_workers, len(hospitals)))
    try:
        futures = [
            executor.submit(resolve_route, provider, origin, h.coordinates)
            for h in hospitals
        ]
        done, pending = wait(futures, timeout=timeout_s)
        if pending:
            logger.warning(
                "%d/%d route lookup belum selesai setelah %.1fs, pakai fallback",
                len(pending), len(futures), timeout_s,
            )

        routes: List[Route] = []
        for hospital, future in zip(hospitals, futures):
            if future in done:
                routes.append(future.result())
            else:
                routes.append(fallback_route(origin, hospital.coordinates))
        return routes
    finally:
        # lookup yang masih antre dibatalkan; yang sedang jalan dibatasi timeout HTTP provider
        executor.shutdown(wait=False, cancel_futures=True)


def match_hospitals(
    hospitals: Sequence[Hospital],
    patient_location: LonLat,
    patient_data: PatientData,
    route_provider: Optional[RouteProvider] = None,
    config: Optional[Dict[str, Any]] = None,
) -> List[HospitalMatch]:
    """
    Ranking RS untuk satu pasien.
    - tiap RS dinilai independen
    - gagal ambil rute tidak pernah menggugurkan RS (pakai jarak fallback)
    - urut skor tertinggi dulu; skor sama tetap urutan direktori
    """
    if not hospitals:
        return []

    weights = extract_weights(config)
    routing = extract_routing(config)

    routes = lookup_routes(
        hospitals,
        patient_location,
        route_provider,
        timeout_s=routing["timeout_s"],
        max_workers=routing["max_workers"],
    )

    matches = [
        build_match(hospital, patient_data, route, weights)
        for hospital, route in zip(hospitals, routes)
    ]

    # sorted() stabil, juga dengan reverse=True
    return sorted(matches, key=lambda m: m.score, reverse=True)


def get_top_matches(matches: Sequence[HospitalMatch], count: int = 3) -> List[HospitalMatch]:
    return list(matches[:count])


def filter_by_min_score(matches: Sequence[HospitalMatch], min_score: int = 50) -> List[HospitalMatch]:
    return [m for m in matches if m.score >= min_score]
