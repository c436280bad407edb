# parking_telemetry/utils/numbers.py
"""Rounding helpers. Percentages and rates use half-up rounding, not banker's rounding."""

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value, places: int = 2) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(part, whole, empty: float = 0.0) -> float:
    """part / whole × 100 rounded to 2 dp; `empty` when whole is zero."""
    if not whole:
        return empty
    return round_half_up(float(part) * 100 / float(whole), 2)


def ratio(part, whole, places: int = 2) -> float:
    if not whole:
        return 0.0
    return round_half_up(float(part) / float(whole), places)
