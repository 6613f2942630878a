from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ambudispatch.core.security import require_api_key
from ambudispatch.core.vitals import generate_by_severity, get_status_color, is_abnormal, simulate_change
from ambudispatch.models.schemas import Severity, VitalReading, VitalSigns

router = APIRouter(prefix="/vitals", tags=["vitals"], dependencies=[Depends(require_api_key)])


class GenerateRequest(BaseModel):
    severity: Severity

class TickRequest(BaseModel):
    current: VitalSigns
    severity: Severity


def _reading(vitals: VitalSigns) -> VitalReading:
    return VitalReading(
        vitals=vitals,
        assessment=is_abnormal(vitals),
        status_color=get_status_color(vitals),
    )


@router.post("/generate", response_model=VitalReading, summary="Initial vitals for a severity tier")
def generate(req: GenerateRequest):
    return _reading(generate_by_severity(req.severity))


@router.post("/tick", response_model=VitalReading, summary="Next sample of the live vitals feed")
def tick(req: TickRequest):
    return _reading(simulate_change(req.current, req.severity))


@router.post("/assess", response_model=VitalReading, summary="Flag abnormal vitals")
def assess(vitals: VitalSigns):
    return _reading(vitals)
