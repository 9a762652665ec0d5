import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

SUPPORTED_BACKENDS = ("mysql", "postgres", "null")


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Alert Recorder"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # HTTP listener
    HOST: str = "0.0.0.0"
    PORT: int = 9567

    # Database
    DATABASE_BACKEND: str = "mysql"
    DATABASE_URL: str = ""
    DB_MAX_IDLE_CONNS: int = 2
    DB_MAX_OPEN_CONNS: int = 2
    DB_MAX_CONN_LIFETIME_SECONDS: int = 600

    # Dry run: accept webhooks without writing them anywhere
    DRY_RUN: bool = False

    # Upper bound for a single webhook write
    WEBHOOK_SAVE_TIMEOUT_SECONDS: float = 15.0

    @field_validator("DATABASE_BACKEND", mode="before")
    def _normalize_backend(cls, v):
        value = (v or "").strip().lower()
        if value == "postgresql":
            value = "postgres"
        if value not in SUPPORTED_BACKENDS:
            raise ValueError(f"unsupported database backend {v!r}, expected one of {', '.join(SUPPORTED_BACKENDS)}")
        return value

    @field_validator("DATABASE_URL")
    def _strip_dsn(cls, v: str):
        return (v or "").strip()

    @field_validator("LOG_LEVEL")
    def _upper_log_level(cls, v: str):
        return (v or "INFO").strip().upper()

    @field_validator("DB_MAX_IDLE_CONNS", "DB_MAX_OPEN_CONNS", "DB_MAX_CONN_LIFETIME_SECONDS")
    def _positive(cls, v: int):
        if v < 1:
            raise ValueError("connection pool bounds must be positive")
        return v

    @model_validator(mode="after")
    def _validate_database_config(self):
        if self.DB_MAX_IDLE_CONNS > self.DB_MAX_OPEN_CONNS:
            logging.getLogger(__name__).warning(
                f"DB_MAX_IDLE_CONNS ({self.DB_MAX_IDLE_CONNS}) is larger than DB_MAX_OPEN_CONNS "
                f"({self.DB_MAX_OPEN_CONNS}); idle connections will be capped at {self.DB_MAX_OPEN_CONNS}."
            )
        if self.effective_backend != "null" and not self.DATABASE_URL:
            logging.getLogger(__name__).warning(
                "DATABASE_URL is empty; the service will refuse to start until it is set "
                "(or set DRY_RUN=true for local dev)."
            )
        return self

    @property
    def effective_backend(self) -> str:
        return "null" if self.DRY_RUN else self.DATABASE_BACKEND

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
