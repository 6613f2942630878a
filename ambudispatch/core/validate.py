from typing import List, Sequence

from ambudispatch.models.schemas import Hospital

class ValidationError(Exception):
    pass

# angka negatif dan rating di luar 0..5 sudah ditolak oleh schema;
# di sini hanya aturan lintas-field dan lintas-RS

def _check_pool(errors: List[str], hid: str, name: str, total: int, available: int) -> None:
    if available > total: errors.append(f"{hid}: {name}.available cannot exceed {name}.total")

def validate_hospitals(hospitals: Sequence[Hospital]) -> None:
    errors: List[str] = []
    seen = set()
    for h in hospitals:
        if h.id in seen: errors.append(f"duplicate hospital id {h.id}")
        seen.add(h.id)

        lon, lat = h.coordinates
        if lat < -90 or lat > 90: errors.append(f"{h.id}: lat must be in [-90, 90]")
        if lon < -180 or lon > 180: errors.append(f"{h.id}: lon must be in [-180, 180]")

        for name in ("general", "icu", "emergency"):
            pool = getattr(h.beds, name)
            _check_pool(errors, h.id, f"beds.{name}", pool.total, pool.available)
        for d in h.doctors:
            _check_pool(errors, h.id, f"doctors[{d.specialization}]", d.total, d.available)
    if errors: raise ValidationError("; ".join(errors))
