#!/usr/bin/env python3
"""
Drive a live tracking session against the Run Tracker API.

Starts a session, then once per second pushes a GPS fix along a straight
line heading north plus a cumulative pedometer value, and finally stops
the session and prints the summary.

Every --jump-every seconds a fix is thrown ~1 km off course to exercise
the noise filter (its distance must not count).

Usage examples:
  - Against a local backend:
      python scripts/simulate_run.py --base-url http://localhost:8000 --seconds 60
  - Faster than real time (no sleeping between samples):
      python scripts/simulate_run.py --base-url http://localhost:8000 --no-sleep
"""

from __future__ import annotations

import argparse
import json
import sys
import time

try:
    import requests  # type: ignore
except Exception as exc:  # pragma: no cover
    print("This script requires the 'requests' package.\nInstall with: pip install requests", file=sys.stderr)
    raise


# ~0.000027 deg latitude per metre
DEG_PER_M = 1.0 / 111_195.0


def post_json(base_url: str, path: str, payload: dict | None = None) -> dict:
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    r = requests.post(url, json=payload, timeout=15)
    if r.status_code >= 300:
        raise RuntimeError(f"{path} -> HTTP {r.status_code}: {r.text}")
    return r.json()


def simulate(base_url: str, seconds: int, speed_mps: float, cadence_spm: int, jump_every: int, sleep: bool) -> dict:
    post_json(base_url, "tracking/start")

    lat, lon = 52.3600, 4.8850
    raw_steps = 12_000  # device counter is never 0 at session start
    for t in range(seconds):
        lat += speed_mps * DEG_PER_M
        fix = {"latitude": lat, "longitude": lon, "speed": speed_mps}
        if jump_every and t and t % jump_every == 0:
            fix["latitude"] = lat + 1000 * DEG_PER_M
        post_json(base_url, "tracking/positions", fix)

        raw_steps += round(cadence_spm / 60)
        post_json(base_url, "tracking/steps", {"steps": raw_steps})

        if sleep:
            time.sleep(1.0)

    return post_json(base_url, "tracking/stop")


def main() -> None:
    ap = argparse.ArgumentParser(description="Simulate a live run against the tracker API")
    ap.add_argument("--base-url", required=True, help="API base URL (e.g., http://localhost:8000)")
    ap.add_argument("--seconds", type=int, default=60, help="Number of one-second samples to send")
    ap.add_argument("--speed", type=float, default=3.0, help="Running speed in m/s")
    ap.add_argument("--cadence", type=int, default=170, help="Steps per minute")
    ap.add_argument("--jump-every", type=int, default=20, help="Inject a GPS jump every N samples (0 = never)")
    ap.add_argument("--no-sleep", action="store_true", help="Send samples back to back")
    args = ap.parse_args()

    summary = simulate(args.base_url, args.seconds, args.speed, args.cadence, args.jump_every, not args.no_sleep)
    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    main()
