# ambudispatch/api/v1/endpoints/health.py
import logging
from datetime import datetime

from fastapi import APIRouter

from ambudispatch.core.config import extract_directory, load_config
from ambudispatch.core.data_access import load_directory
from ambudispatch.core.routing import get_route_provider
from ambudispatch.core.security import configured_api_key

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


@router.get("/health")
def health_check():
    """
    Status service untuk dashboard dispatch:
    - sumber direktori RS (seed / database) dan jumlah RS yang termuat
    - mode routing: mapbox kalau MAPBOX_TOKEN ada, selain itu fallback haversine
    - auth_enabled: apakah endpoint dispatch butuh X-API-Key
    Error saat memuat direktori tidak dilempar; status jadi "degraded".
    """
    checked_at = datetime.utcnow().isoformat() + "Z"
    report = {
        "timestamp": checked_at,
        "auth_enabled": bool(configured_api_key()),
    }

    try:
        config = load_config()
        source, _ = extract_directory(config)
        report["directory_source"] = source
        report["routing"] = "mapbox" if get_route_provider(config) else "fallback"
        report["hospitals"] = len(load_directory(config))
        report["status"] = "ok"
    except Exception as e:
        logger.warning("health check gagal: %s", e)
        report["status"] = "degraded"
        report["message"] = str(e)

    return report
