"""Shared tracking constants.

Centralizes the unit conversions and filter thresholds used by the live
tracker so they are documented and adjusted in one place.
"""

# Mean earth radius for the spherical (haversine) model, meters
EARTH_RADIUS_M = 6371000.0

# Fixes this far (or farther) from the previous one are treated as GPS jumps
MAX_FIX_DELTA_M = 100.0

METERS_PER_KM = 1000.0

# m/s -> km/h
MPS_TO_KMH = 3.6

SECONDS_PER_HOUR = 3600

# Snapshot period while a session is active
TICK_SECONDS = 1.0
