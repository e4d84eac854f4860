from fastapi import Request

from run_tracker.runtime import TrackerRuntime


# Dependency we will use in FastAPI routes
def get_runtime(request: Request) -> TrackerRuntime:
    return request.app.state.runtime
