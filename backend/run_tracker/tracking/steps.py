from typing import Optional, Tuple


def normalize_steps(baseline: Optional[int], raw: int) -> Tuple[int, int]:
    """
    Turn a raw cumulative pedometer value into a session-relative count.

    Returns (relative_count, baseline). `None` means no baseline yet: the
    first reading is captured as the baseline even when it is 0. A reading
    below the baseline (counter reset after a reboot) clamps to 0 and leaves
    the baseline where it is.
    """
    if raw < 0:
        raise ValueError("step counter reading must be >= 0")

    if baseline is None:
        return 0, raw

    return max(raw - baseline, 0), baseline
