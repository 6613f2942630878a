from typing import Any, Dict, Sequence

import numpy as np

from ambudispatch.models.schemas import HospitalMatch


def compute_metrics(matches: Sequence[HospitalMatch]) -> Dict[str, Any]:
    """
    Hitung ringkasan dari hasil matching satu pasien.
    """
    total = len(matches)

    if total == 0:
        return {
            "total_matches": 0,
            "score_mean": 0.0,
            "score_min": 0,
            "score_max": 0,
            "avg_distance_km": 0.0,
            "avg_eta_min": 0.0,
            "beds_available_ratio": 0.0,
            "doctors_available_ratio": 0.0,
            "blood_available_ratio": 0.0,
            "fallback_routes": 0,
        }

    scores = np.array([m.score for m in matches], dtype=float)
    distances = np.array([m.distance for m in matches], dtype=float)
    etas = np.array([m.eta for m in matches], dtype=float)

    beds = np.array([m.availability_status.beds for m in matches], dtype=bool)
    doctors = np.array([m.availability_status.doctors for m in matches], dtype=bool)
    blood = np.array([m.availability_status.blood for m in matches], dtype=bool)

    return {
        "total_matches": total,
        "score_mean": float(np.mean(scores)),
        "score_min": int(np.min(scores)),
        "score_max": int(np.max(scores)),
        "avg_distance_km": float(np.mean(distances)),
        "avg_eta_min": float(np.mean(etas)),
        "beds_available_ratio": float(np.mean(beds)),
        "doctors_available_ratio": float(np.mean(doctors)),
        "blood_available_ratio": float(np.mean(blood)),
        "fallback_routes": int(sum(1 for m in matches if m.route_source == "fallback")),
    }
