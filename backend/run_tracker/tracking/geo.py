import math
from dataclasses import dataclass
from typing import Optional, Union

from run_tracker.core.constants import (
    EARTH_RADIUS_M,
    MAX_FIX_DELTA_M,
    METERS_PER_KM,
    MPS_TO_KMH,
)
from run_tracker.tracking.types import PositionFix


@dataclass(frozen=True)
class NoPriorFix:
    """First fix of the session; it only becomes the reference."""


@dataclass(frozen=True)
class Accepted:
    delta_km: float


@dataclass(frozen=True)
class Rejected:
    """Delta discarded as noise. `delta_m` is kept for logging."""
    delta_m: float


FixOutcome = Union[NoPriorFix, Accepted, Rejected]


def haversine_m(lat1, lon1, lat2, lon2):
    """Return great-circle distance in meters between two WGS84 points.

    Uses the standard haversine formula; sufficient for per-fix distances
    over a typical running track.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def evaluate_fix(
    previous: Optional[PositionFix],
    fix: PositionFix,
    max_delta_m: float = MAX_FIX_DELTA_M,
) -> FixOutcome:
    """Classify the distance contribution of `fix` relative to `previous`.

    Deltas of 0 m or less (no movement) and of `max_delta_m` or more
    (GPS jump) are rejected. Either way the caller moves its reference to
    `fix`; only the distance is discarded.
    """
    if previous is None:
        return NoPriorFix()

    delta_m = haversine_m(previous.latitude, previous.longitude, fix.latitude, fix.longitude)
    if delta_m <= 0 or delta_m >= max_delta_m:
        return Rejected(delta_m=delta_m)
    return Accepted(delta_km=delta_m / METERS_PER_KM)


def speed_kmh(fix: PositionFix) -> float:
    # Missing (None) and invalid (negative) reported speeds read as standing still
    if fix.speed is None or fix.speed < 0:
        return 0.0
    return fix.speed * MPS_TO_KMH
