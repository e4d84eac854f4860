from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    database_url: str = "sqlite+pysqlite:///./run_tracker.db"

    # Live tracking
    max_fix_delta_m: float = 100.0  # jumps at or above this are GPS noise
    # No prompt UI on the backend; the gate answers from here.
    location_permission_granted: bool = True

    log_level: str = "INFO"

    @field_validator("max_fix_delta_m")
    @classmethod
    def _positive(cls, v):
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        if v in ("", None):
            return "INFO"
        return str(v).upper()

    class Config:
        env_file = ".env"


settings = Settings()
