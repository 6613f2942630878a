from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel, Field

from ambudispatch.core.audit import log_event
from ambudispatch.core.config import load_config
from ambudispatch.core.data_access import load_directory
from ambudispatch.core.matching import filter_by_min_score, get_top_matches, match_hospitals
from ambudispatch.core.metrics import compute_metrics
from ambudispatch.core.routing import get_route_provider
from ambudispatch.core.security import require_api_key
from ambudispatch.models.schemas import Hospital, LonLat, MatchResult, PatientData

router = APIRouter(
    prefix="/match",
    tags=["matching"],
    dependencies=[Depends(require_api_key)],
)


class MatchRequest(BaseModel):
    """
    Lokasi pasien (lon, lat) + profil hasil klasifikasi gejala.
    Kalau hospitals kosong, direktori dimuat dari loader (seed di sekitar pasien / database).
    """
    patient_location: LonLat
    patient: PatientData
    hospitals: Optional[List[Hospital]] = None
    top_n: Optional[int] = Field(default=None, ge=1)
    min_score: Optional[int] = Field(default=None, ge=0, le=100)


@router.post("", response_model=MatchResult)
def run_matching(
    body: MatchRequest,
    response: Response,
    request: Request,
):
    """
    Ranking RS untuk satu pasien.
    - Terproteksi API key (require_api_key).
    - Rute dari Mapbox kalau MAPBOX_TOKEN diset, selain itu jarak garis lurus.
    - Metrics dihitung dari seluruh ranking, sebelum filter top_n / min_score.
    """
    config = load_config()

    hospitals = body.hospitals
    if hospitals is None:
        hospitals = load_directory(config, center=body.patient_location)

    matches = match_hospitals(
        hospitals=hospitals,
        patient_location=body.patient_location,
        patient_data=body.patient,
        route_provider=get_route_provider(config),
        config=config,
    )
    metrics = compute_metrics(matches)

    if body.min_score is not None:
        matches = filter_by_min_score(matches, body.min_score)
    if body.top_n is not None:
        matches = get_top_matches(matches, body.top_n)

    req_id = getattr(request.state, "request_id", None)
    log_event(
        "match_run",
        {
            "severity": body.patient.severity,
            "urgency": body.patient.urgency,
            "required_specialization": list(body.patient.required_specialization),
            "metrics": metrics,
            "top": [{"hospital_id": m.hospital.id, "score": m.score} for m in matches[:3]],
        },
        request_id=req_id,
    )

    if matches:
        response.headers["X-Best-Hospital"] = matches[0].hospital.id

    return MatchResult(count=len(matches), matches=matches, metrics=metrics)
