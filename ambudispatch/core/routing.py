import logging
import os
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from ambudispatch.core.config import extract_routing
from ambudispatch.core.distance import lonlat_distance
from ambudispatch.core.numeric import round_half_up

logger = logging.getLogger(__name__)

# perkiraan kasar ambulans di kota: 2 menit per km (~30 km/jam)
FALLBACK_MINUTES_PER_KM = 2.0

LonLat = Tuple[float, float]


class RouteError(Exception):
    pass


@dataclass(frozen=True)
class Route:
    distance_km: float
    duration_minutes: int
    source: str = "provider"


RouteProvider = Callable[[LonLat, LonLat], Route]


def fallback_route(origin: LonLat, destination: LonLat) -> Route:
    """
    Jarak garis lurus (haversine) + ETA 2 menit/km.
    Dipakai kalau provider rute gagal, timeout, atau tidak dikonfigurasi.
    """
    distance_km = lonlat_distance(origin, destination)
    return Route(
        distance_km=distance_km,
        duration_minutes=round_half_up(distance_km * FALLBACK_MINUTES_PER_KM),
        source="fallback",
    )


class MapboxRouteProvider:
    """
    Provider rute mengemudi lewat Mapbox Directions API.
    Semua kegagalan (jaringan, timeout, status non-2xx, body aneh) → RouteError.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.mapbox.com/directions/v5/mapbox/driving",
        timeout_s: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def __call__(self, origin: LonLat, destination: LonLat) -> Route:
        url = (
            f"{self.base_url}/{origin[0]},{origin[1]};{destination[0]},{destination[1]}"
        )
        try:
            response = self.session.get(
                url,
                params={"access_token": self.access_token},
                timeout=self.timeout_s,
            )
            response.raise_for_status()
            data = response.json()
            route = data["routes"][0]
            return Route(
                distance_km=float(route["distance"]) / 1000.0,
                duration_minutes=round_half_up(float(route["duration"]) / 60.0),
            )
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            raise RouteError(f"Failed to fetch route: {e}") from e


def get_route_provider(config: Optional[Dict[str, Any]] = None) -> Optional[RouteProvider]:
    """
    Kalau MAPBOX_TOKEN tidak diset → None (matching memakai jarak fallback saja).
    """
    token = os.getenv("MAPBOX_TOKEN", "").strip()
    if not token:
        return None
    routing = extract_routing(config)
    return MapboxRouteProvider(
        access_token=token,
        base_url=routing["base_url"],
        timeout_s=routing["timeout_s"],
    )


def resolve_route(
    provider: Optional[RouteProvider],
    origin: LonLat,
    destination: LonLat,
) -> Route:
    """
    Ambil rute dari provider; error apa pun dari provider diturunkan ke fallback,
    tidak pernah dilempar ke pemanggil.
    """
    if provider is None:
        return fallback_route(origin, destination)
    try:
        return provider(origin, destination)
    except Exception as e:
        logger.warning("route lookup %s -> %s gagal, pakai fallback: %s", origin, destination, e)
        return fallback_route(origin, destination)
