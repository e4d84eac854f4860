from run_tracker.core.constants import SECONDS_PER_HOUR


def seconds_to_hhmmss(total_seconds: int) -> str:
    """
    Convert total seconds (int) -> 'HH:MM:SS'.
    Example: 2732 -> '00:45:32'
    """
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_clock(total_seconds: int) -> str:
    """Live stopwatch display: 'MM:SS', or 'HH:MM:SS' once past an hour."""
    if total_seconds >= 3600:
        return seconds_to_hhmmss(total_seconds)
    minutes = total_seconds // 60
    seconds = total_seconds % 60
    return f"{minutes:02d}:{seconds:02d}"


def format_duration(total_seconds: int) -> str:
    """
    Human summary of a duration.
    Example: 3723 -> '1h 2m 3s', 123 -> '2m 3s', 9 -> '9s'
    """
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def pace_min_per_km(duration_seconds: int, distance_km: float) -> float:
    """Minutes per kilometre; 0.0 when no distance has been covered."""
    if distance_km <= 0:
        return 0.0
    return duration_seconds / 60 / distance_km


def compute_pace(duration_seconds: int, distance_km: float) -> str:
    """
    Compute pace per kilometre as 'M:SS/km'.
    Example: duration=1800 sec, distance=5.0 -> '6:00/km'
    """
    if distance_km <= 0:
        return "0:00/km"

    pace_sec = int(round(duration_seconds / distance_km))

    minutes = pace_sec // 60
    seconds = pace_sec % 60
    return f"{minutes}:{seconds:02d}/km"


def average_speed_kmh(distance_km: float, duration_seconds: int) -> float:
    """
    distance / (duration / 3600), guarded against zero duration and zero
    distance.
    Example: 5 km in 1800 s -> 10.0
    """
    if duration_seconds <= 0 or not distance_km or distance_km <= 0:
        return 0.0
    return distance_km / (duration_seconds / SECONDS_PER_HOUR)
