# ambudispatch/api/v1/endpoints/hospitals.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ambudispatch.core.config import load_config
from ambudispatch.core.data_access import load_directory
from ambudispatch.core.directory import update_hospital_availability
from ambudispatch.core.security import require_api_key
from ambudispatch.models.schemas import Hospital, Specialization

router = APIRouter(prefix="/hospitals", tags=["hospitals"])


class DriftRequest(BaseModel):
    hospitals: List[Hospital]


@router.get("", response_model=List[Hospital])
def list_hospitals(
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Titik tengah direktori seed (longitude)"),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Titik tengah direktori seed (latitude)"),
    specialization: Optional[Specialization] = Query(
        None,
        description="Filter RS yang punya spesialisasi tertentu, misal: Cardiac, Trauma",
    ),
) -> List[Hospital]:
    """
    Ambil direktori RS.
    - Sumber seed: RS demo di sekitar (lon, lat), default titik tengah dari config
    - Sumber database: tabel hospitals
    """
    center = (lon, lat) if lon is not None and lat is not None else None
    return load_directory(load_config(), center=center, specialization=specialization)


@router.post("/drift", response_model=List[Hospital], dependencies=[Depends(require_api_key)])
def drift_availability(req: DriftRequest) -> List[Hospital]:
    """
    Satu langkah simulasi fluktuasi bed (±1 per pool) untuk daftar RS yang dikirim.
    """
    return [update_hospital_availability(h) for h in req.hospitals]
