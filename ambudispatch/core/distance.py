import math
from typing import Tuple

RADIUS_EARTH_KM = 6371.0


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Menghitung jarak great-circle (jarak terpendek pada permukaan bumi) antara dua titik
    yang dinyatakan dalam koordinat derajat desimal.
    Mengembalikan nilai jarak dalam satuan kilometer.
    """
    rlat1 = math.radians(lat1)
    rlon1 = math.radians(lon1)
    rlat2 = math.radians(lat2)
    rlon2 = math.radians(lon2)

    dlon = rlon2 - rlon1
    dlat = rlat2 - rlat1

    a = math.sin(dlat / 2.0) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlon / 2.0) ** 2
    c = 2 * math.asin(math.sqrt(a))

    return RADIUS_EARTH_KM * c


def lonlat_distance(origin: Tuple[float, float], destination: Tuple[float, float]) -> float:
    """Haversine untuk pasangan (lon, lat), format koordinat yang dipakai peta."""
    return haversine(origin[1], origin[0], destination[1], destination[0])


def destination_point(origin: Tuple[float, float], distance_km: float, bearing_deg: float) -> Tuple[float, float]:
    """
    Titik tujuan dari `origin` (lon, lat) setelah bergerak `distance_km`
    dengan arah `bearing_deg` (0 = utara, searah jarum jam).
    """
    lon1 = math.radians(origin[0])
    lat1 = math.radians(origin[1])
    bearing = math.radians(bearing_deg)
    delta = distance_km / RADIUS_EARTH_KM

    lat2 = math.asin(
        math.sin(lat1) * math.cos(delta)
        + math.cos(lat1) * math.sin(delta) * math.cos(bearing)
    )
    lon2 = lon1 + math.atan2(
        math.sin(bearing) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )

    return math.degrees(lon2), math.degrees(lat2)
