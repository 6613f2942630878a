from typing import List

from ambudispatch.models.schemas import Hospital, PatientData


def _fmt_number(x: float) -> str:
    # 4.8 -> "4.8", 5.0 -> "5"
    return f"{x:g}"


def build_match_reasons(hospital: Hospital, patient: PatientData) -> List[str]:
    """
    Alasan yang bisa dibaca manusia kenapa RS ini cocok, urutannya tetap:
    spesialisasi → bed → dokter → darah → layanan 24/7 → rating → response time.
    Kondisi yang kosong dilewati saja.
    """
    reasons: List[str] = []
    required = patient.required_specialization

    matched_specs = [s for s in hospital.specializations if s in required]
    if matched_specs:
        reasons.append(f"Specializes in {', '.join(matched_specs)}")

    beds = hospital.beds
    if beds.icu.available > 0 and patient.severity == "Critical":
        reasons.append(f"{beds.icu.available} ICU beds available")
    elif beds.emergency.available > 0:
        reasons.append(f"{beds.emergency.available} emergency beds available")

    available_doctors = sum(
        d.available for d in hospital.doctors
        if d.specialization in required and d.available > 0
    )
    if available_doctors > 0:
        reasons.append(f"{available_doctors} specialists available")

    if patient.blood_type_needed:
        blood = next((b for b in hospital.blood_bank if b.blood_type == patient.blood_type_needed), None)
        if blood and blood.units > 0:
            reasons.append(f"{blood.units} units of {patient.blood_type_needed} blood available")

    if hospital.has_24x7_service:
        reasons.append("24/7 emergency service")

    if hospital.rating >= 4.7:
        reasons.append(f"Highly rated ({_fmt_number(hospital.rating)}★)")

    if hospital.response_time <= 7:
        reasons.append(f"Quick response time ({_fmt_number(hospital.response_time)} min)")

    return reasons
