import math


def round_half_up(x: float) -> int:
    # round() bawaan Python memakai banker's rounding (72.5 -> 72)
    return int(math.floor(x + 0.5))


def round_half_up_to(x: float, decimals: int) -> float:
    """Pembulatan half-up ke `decimals` angka desimal (36.25 -> 36.3, bukan 36.2)."""
    factor = 10 ** decimals
    return round_half_up(x * factor) / factor


def clamp(x, lower, upper):
    return max(lower, min(upper, x))
