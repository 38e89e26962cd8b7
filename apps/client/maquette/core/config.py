from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _normalise_base_url(url: str) -> str:
    """Strip trailing slashes so ``{base_url}/maquette`` never doubles up.

    ``http://host:8001/`` and ``http://host:8001`` both name the same service
    root; the client appends the ``/maquette`` path itself.
    """
    return url.strip().rstrip("/")


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    Every field can be overridden with a ``MAQUETTE_``-prefixed variable,
    e.g. ``MAQUETTE_BASE_URL=https://maquette.example.com``.

    Transport security
    ──────────────────
    Plain ``http://`` base URLs are only accepted for loopback hosts
    (the local development server).  Set ``allow_insecure_http`` to talk
    to a LAN host over http.
    """

    model_config = SettingsConfigDict(
        env_prefix="MAQUETTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service
    base_url: str = "http://127.0.0.1:8001"
    allow_insecure_http: bool = False

    @field_validator("base_url", mode="before")
    @classmethod
    def normalise_base_url(cls, v: str) -> str:
        return _normalise_base_url(v)

    # Per-request timeout in seconds. Generation is slow server-side, so
    # this is generous, but it is always bounded.
    request_timeout: float = 300.0

    @field_validator("request_timeout")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be greater than zero")
        return v

    # Storage
    storage_dir: Path = Path.home() / ".maquette" / "artifacts"

    # Session behaviour
    concurrent_variants: bool = False
    rollback_on_failure: bool = False

    # App
    debug: bool = True


def get_settings() -> Settings:
    return Settings()
