from typing import Optional, Sequence

from run_tracker.tracking.types import PositionFix


def build_route(points: Sequence[PositionFix]) -> dict:
    """Build the map payload for a session route.

    - geojson: LineString with [lon, lat] coordinates, or None if empty
    - bounds: {minLat, minLon, maxLat, maxLon}, or None if empty
    - points_count
    """
    geojson: Optional[dict] = None
    bounds: Optional[dict] = None
    if points:
        lats = [p.latitude for p in points]
        lons = [p.longitude for p in points]
        bounds = {
            "minLat": min(lats),
            "minLon": min(lons),
            "maxLat": max(lats),
            "maxLon": max(lons),
        }
        coords = [[p.longitude, p.latitude] for p in points]
        geojson = {"type": "LineString", "coordinates": coords}

    return {
        "geojson": geojson,
        "bounds": bounds,
        "points_count": len(points),
    }
