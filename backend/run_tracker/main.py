import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from run_tracker.api.sessions import router as sessions_router
from run_tracker.api.tracking import router as tracking_router
from run_tracker.db import Base, SessionLocal, engine
from run_tracker.models.run_session import RunSession  # noqa: F401  (import ensures table is registered)
from run_tracker.models.location_point import LocationPoint  # noqa: F401
from run_tracker.models.data_point import DataPoint  # noqa: F401
from run_tracker.core.config import settings
from run_tracker.core.logging import configure_logging
from run_tracker.runtime import build_runtime

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.runtime = build_runtime(settings, SessionLocal)
    try:
        yield
    finally:
        # no sensor subscription may outlive the app
        await app.state.runtime.coordinator.close()
        logger.info("Tracker shut down")


app = FastAPI(title="Run Tracker API", lifespan=lifespan)

# Allow CORS for local frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables (sessions, points) on startup
Base.metadata.create_all(bind=engine)

app.include_router(tracking_router)
app.include_router(sessions_router)


@app.get("/")
def root():
    return {"message": "Run tracker backend is running"}
