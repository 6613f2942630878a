import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ambudispatch.core.distance import destination_point
from ambudispatch.core.numeric import clamp
from ambudispatch.models.schemas import BedAvailability, BedPool, BloodStock, Hospital

_default_rng = random.Random()

FULL_BLOOD_BANK = [
    ("O+", 50), ("O-", 30), ("A+", 45), ("A-", 25),
    ("B+", 40), ("B-", 20), ("AB+", 35), ("AB-", 15),
]

# (general, icu, emergency) -> (total, available)
# doctors: (specialization, total, available, on_call)
# blood: "full", "full_high", atau daftar golongan darah parsial
SEED_HOSPITALS: List[Dict[str, Any]] = [
    {
        "id": "HOSP-001", "name": "Heart Care Center", "km": 1.2, "bearing": 45,
        "specializations": ["Cardiac", "Emergency"], "primary": "Cardiac",
        "beds": ((80, 12), (20, 3), (15, 5)),
        "doctors": [("Cardiac", 15, 8, 3), ("Emergency", 10, 6, 2)],
        "blood": "full", "rating": 4.8, "response_time": 8,
        "flags": (True, True, True),
        "facilities": ["ECG", "Cath Lab", "CT Scan", "MRI", "ICU", "CCU"],
        "contact": "+91-9876543210", "address": "123 Cardiac Lane, Medical District",
    },
    {
        "id": "HOSP-002", "name": "Apollo Cardiac Institute", "km": 2.5, "bearing": 135,
        "specializations": ["Cardiac", "General", "Emergency"], "primary": "Cardiac",
        "beds": ((120, 25), (30, 8), (20, 10)),
        "doctors": [("Cardiac", 25, 15, 5), ("General", 20, 12, 4), ("Emergency", 15, 10, 3)],
        "blood": "full", "rating": 4.9, "response_time": 6,
        "flags": (True, True, True),
        "facilities": ["ECG", "Cath Lab", "CT Scan", "MRI", "ICU", "CCU", "Cardiac Surgery"],
        "contact": "+91-9876543211", "address": "456 Heart Avenue, Apollo Complex",
    },
    {
        "id": "HOSP-003", "name": "City Trauma Center", "km": 1.8, "bearing": 225,
        "specializations": ["Trauma", "Orthopedic", "Emergency"], "primary": "Trauma",
        "beds": ((100, 18), (25, 6), (30, 15)),
        "doctors": [("Trauma", 20, 12, 4), ("Orthopedic", 15, 9, 3), ("Emergency", 18, 12, 4)],
        "blood": "full_high", "rating": 4.7, "response_time": 5,
        "flags": (True, True, True),
        "facilities": ["X-Ray", "CT Scan", "MRI", "Operation Theater", "ICU", "Blood Bank"],
        "contact": "+91-9876543212", "address": "789 Emergency Road, Trauma Wing",
    },
    {
        "id": "HOSP-004", "name": "Brain & Spine Institute", "km": 2.2, "bearing": 315,
        "specializations": ["Neurology", "Emergency"], "primary": "Neurology",
        "beds": ((70, 15), (18, 4), (12, 6)),
        "doctors": [("Neurology", 18, 10, 4), ("Emergency", 8, 5, 2)],
        "blood": ["O+", "O-", "A+", "AB+"], "rating": 4.9, "response_time": 10,
        "flags": (True, True, True),
        "facilities": ["MRI", "CT Scan", "EEG", "Neurosurgery", "ICU"],
        "contact": "+91-9876543213", "address": "321 Neuro Street, Brain Complex",
    },
    {
        "id": "HOSP-005", "name": "Children's Hospital", "km": 1.5, "bearing": 90,
        "specializations": ["Pediatric", "General", "Emergency"], "primary": "Pediatric",
        "beds": ((90, 20), (15, 5), (18, 8)),
        "doctors": [("Pediatric", 22, 14, 5), ("General", 12, 8, 3), ("Emergency", 10, 6, 2)],
        "blood": ["O+", "A+", "B+", "AB+"], "rating": 4.8, "response_time": 7,
        "flags": (True, True, True),
        "facilities": ["Pediatric ICU", "NICU", "X-Ray", "Ultrasound", "Vaccination Center"],
        "contact": "+91-9876543214", "address": "555 Kids Avenue, Children's Wing",
    },
    {
        "id": "HOSP-006", "name": "Vision Eye Care", "km": 1.0, "bearing": 180,
        "specializations": ["Eye"], "primary": "Eye",
        "beds": ((40, 10), (5, 2), (8, 4)),
        "doctors": [("Eye", 12, 7, 2)],
        "blood": ["O+", "A+"], "rating": 4.6, "response_time": 12,
        "flags": (False, True, True),
        "facilities": ["Eye Surgery", "Laser Treatment", "OCT Scan", "Visual Field Test"],
        "contact": "+91-9876543215", "address": "777 Vision Road, Eye Care Center",
    },
    {
        "id": "HOSP-007", "name": "Smile Dental Hospital", "km": 0.8, "bearing": 270,
        "specializations": ["Dental"], "primary": "Dental",
        "beds": ((25, 8), (3, 1), (6, 3)),
        "doctors": [("Dental", 10, 6, 2)],
        "blood": ["O+", "A+", "B+"], "rating": 4.5, "response_time": 15,
        "flags": (False, True, False),
        "facilities": ["Dental Surgery", "X-Ray", "Root Canal", "Orthodontics"],
        "contact": "+91-9876543216", "address": "888 Dental Street, Smile Complex",
    },
    {
        "id": "HOSP-008", "name": "Mother & Child Hospital", "km": 1.9, "bearing": 60,
        "specializations": ["Maternity", "Pediatric", "General"], "primary": "Maternity",
        "beds": ((85, 16), (12, 4), (15, 7)),
        "doctors": [("Maternity", 18, 11, 4), ("Pediatric", 12, 7, 3), ("General", 10, 6, 2)],
        "blood": "full", "rating": 4.8, "response_time": 6,
        "flags": (True, True, True),
        "facilities": ["Labor Room", "NICU", "Ultrasound", "Fetal Monitor", "Operation Theater"],
        "contact": "+91-9876543217", "address": "999 Maternity Lane, Mother Care",
    },
    {
        "id": "HOSP-009", "name": "City General Hospital", "km": 0.5, "bearing": 0,
        "specializations": ["General", "Emergency"], "primary": "General",
        "beds": ((150, 35), (25, 10), (25, 12)),
        "doctors": [("General", 30, 18, 6), ("Emergency", 20, 12, 4)],
        "blood": "full", "rating": 4.6, "response_time": 8,
        "flags": (True, True, True),
        "facilities": ["X-Ray", "CT Scan", "Ultrasound", "Laboratory", "Pharmacy", "ICU"],
        "contact": "+91-9876543218", "address": "111 General Road, City Center",
    },
    {
        "id": "HOSP-010", "name": "Metro Multispecialty Hospital", "km": 2.8, "bearing": 150,
        "specializations": ["General", "Cardiac", "Orthopedic", "Emergency"], "primary": "General",
        "beds": ((200, 45), (35, 12), (30, 15)),
        "doctors": [
            ("General", 35, 20, 7), ("Cardiac", 12, 7, 3),
            ("Orthopedic", 10, 6, 2), ("Emergency", 18, 11, 4),
        ],
        "blood": "full_high", "rating": 4.7, "response_time": 7,
        "flags": (True, True, True),
        "facilities": ["CT Scan", "MRI", "X-Ray", "Ultrasound", "Laboratory", "Pharmacy", "ICU", "Operation Theater"],
        "contact": "+91-9876543219", "address": "222 Metro Avenue, Multispecialty Complex",
    },
    {
        "id": "HOSP-011", "name": "Bone & Joint Hospital", "km": 1.6, "bearing": 200,
        "specializations": ["Orthopedic", "Trauma"], "primary": "Orthopedic",
        "beds": ((65, 14), (10, 3), (12, 6)),
        "doctors": [("Orthopedic", 16, 10, 3), ("Trauma", 8, 5, 2)],
        "blood": ["O+", "O-", "A+", "B+"], "rating": 4.7, "response_time": 9,
        "flags": (True, True, True),
        "facilities": ["X-Ray", "CT Scan", "MRI", "Physiotherapy", "Operation Theater"],
        "contact": "+91-9876543220", "address": "333 Orthopedic Street, Bone Care",
    },
    {
        "id": "HOSP-012", "name": "Cancer Care Institute", "km": 3.0, "bearing": 280,
        "specializations": ["Oncology", "General"], "primary": "Oncology",
        "beds": ((75, 12), (15, 4), (10, 5)),
        "doctors": [("Oncology", 20, 12, 4), ("General", 10, 6, 2)],
        "blood": "full", "rating": 4.9, "response_time": 11,
        "flags": (True, True, True),
        "facilities": ["Chemotherapy", "Radiation Therapy", "CT Scan", "MRI", "PET Scan", "Laboratory"],
        "contact": "+91-9876543221", "address": "444 Oncology Road, Cancer Center",
    },
    {
        "id": "HOSP-013", "name": "24/7 Emergency Hospital", "km": 0.7, "bearing": 120,
        "specializations": ["Emergency", "Trauma", "General"], "primary": "Emergency",
        "beds": ((60, 18), (20, 8), (35, 20)),
        "doctors": [("Emergency", 25, 18, 6), ("Trauma", 12, 8, 3), ("General", 15, 10, 4)],
        "blood": "full_high", "rating": 4.8, "response_time": 4,
        "flags": (True, True, True),
        "facilities": ["Emergency Room", "Trauma Center", "ICU", "CT Scan", "X-Ray", "Laboratory", "Blood Bank"],
        "contact": "+91-9876543222", "address": "555 Emergency Boulevard, 24x7 Care",
    },
    {
        "id": "HOSP-014", "name": "Advanced Neurosurgery Center", "km": 2.4, "bearing": 330,
        "specializations": ["Neurology", "General"], "primary": "Neurology",
        "beds": ((55, 11), (12, 3), (10, 5)),
        "doctors": [("Neurology", 14, 8, 3), ("General", 8, 5, 2)],
        "blood": ["O+", "O-", "A+", "AB+"], "rating": 4.9, "response_time": 9,
        "flags": (True, True, True),
        "facilities": ["MRI", "CT Scan", "Neurosurgery", "ICU", "EEG"],
        "contact": "+91-9876543223", "address": "666 Neuro Avenue, Advanced Care",
    },
    {
        "id": "HOSP-015", "name": "Pediatric Emergency Center", "km": 1.3, "bearing": 240,
        "specializations": ["Pediatric", "Emergency"], "primary": "Pediatric",
        "beds": ((70, 16), (12, 4), (20, 10)),
        "doctors": [("Pediatric", 18, 12, 4), ("Emergency", 12, 8, 3)],
        "blood": ["O+", "A+", "B+", "AB+"], "rating": 4.7, "response_time": 6,
        "flags": (True, True, True),
        "facilities": ["Pediatric ICU", "NICU", "Emergency Room", "X-Ray", "Ultrasound"],
        "contact": "+91-9876543224", "address": "777 Pediatric Lane, Kids Emergency",
    },
]


def full_blood_bank(high_availability: bool = False) -> List[BloodStock]:
    multiplier = 1.5 if high_availability else 1.0
    return [BloodStock(blood_type=t, units=int(units * multiplier)) for t, units in FULL_BLOOD_BANK]


def partial_blood_bank(types: Sequence[str], rng: Optional[random.Random] = None) -> List[BloodStock]:
    """Stok 20..59 unit untuk tiap golongan darah yang disebut."""
    rng = rng or _default_rng
    return [BloodStock(blood_type=t, units=20 + rng.randrange(40)) for t in types]


def _build_hospital(seed: Dict[str, Any], center: Tuple[float, float], rng: random.Random) -> Hospital:
    (g_total, g_avail), (i_total, i_avail), (e_total, e_avail) = seed["beds"]
    has_ambulance, has_er, has_24x7 = seed["flags"]

    blood = seed["blood"]
    if blood == "full":
        blood_bank = full_blood_bank()
    elif blood == "full_high":
        blood_bank = full_blood_bank(high_availability=True)
    else:
        blood_bank = partial_blood_bank(blood, rng)

    return Hospital(
        id=seed["id"],
        name=seed["name"],
        coordinates=destination_point(center, seed["km"], seed["bearing"]),
        address=seed["address"],
        contact_number=seed["contact"],
        primary_specialization=seed["primary"],
        specializations=list(seed["specializations"]),
        rating=seed["rating"],
        beds=BedAvailability(
            general=BedPool(total=g_total, available=g_avail),
            icu=BedPool(total=i_total, available=i_avail),
            emergency=BedPool(total=e_total, available=e_avail),
        ),
        doctors=[
            {"specialization": s, "total": t, "available": a, "on_call": oc}
            for s, t, a, oc in seed["doctors"]
        ],
        facilities=list(seed["facilities"]),
        blood_bank=blood_bank,
        response_time=seed["response_time"],
        has_ambulance=has_ambulance,
        has_emergency_room=has_er,
        has_24x7_service=has_24x7,
    )


def generate_hospitals(
    center: Tuple[float, float],
    rng: Optional[random.Random] = None,
) -> List[Hospital]:
    """
    Direktori RS demo yang tersebar di sekitar `center` (lon, lat),
    tiap RS pada jarak dan arah tetap dari titik tengah.
    """
    rng = rng or _default_rng
    return [_build_hospital(seed, center, rng) for seed in SEED_HOSPITALS]


def _drift(pool: BedPool, delta: int) -> BedPool:
    return BedPool(total=pool.total, available=clamp(pool.available + delta, 0, pool.total))


def update_hospital_availability(hospital: Hospital, rng: Optional[random.Random] = None) -> Hospital:
    """
    Simulasi fluktuasi okupansi: bed umum & IGD bergeser ±1 (arah sama),
    ICU ikut bergeser hanya dengan peluang 30%. Selalu di-clamp ke [0, total].
    Mengembalikan salinan; objek asli tidak diubah.
    """
    rng = rng or _default_rng
    variance = 1 if rng.random() > 0.5 else -1
    icu_variance = variance if rng.random() > 0.7 else 0

    beds = hospital.beds
    return hospital.model_copy(
        update={
            "beds": BedAvailability(
                general=_drift(beds.general, variance),
                icu=_drift(beds.icu, icu_variance),
                emergency=_drift(beds.emergency, variance),
            )
        }
    )
