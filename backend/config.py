"""Centralized configuration — all env vars in one place."""

import os


def _int_env(name: str, default: int, problems: list[str]) -> int:
    """Read an integer env var, falling back to ``default`` and recording a problem if it is malformed."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        problems.append(f"{name} is not an integer ({raw!r}); using {default}")
        return default


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self._parse_problems: list[str] = []

        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # uvicorn entry point
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _int_env("PORT", 8080, self._parse_problems)

        # Used when a copy request carries no ttl
        self.default_ttl_seconds: int = _int_env("DEFAULT_TTL_SECONDS", 120, self._parse_problems)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return a list of configuration problems (empty when all good)."""
        problems = list(self._parse_problems)
        if not 0 < self.port < 65536:
            problems.append(f"PORT out of range: {self.port}")
        if self.default_ttl_seconds < 0:
            problems.append(
                f"DEFAULT_TTL_SECONDS is negative ({self.default_ttl_seconds}); entries without a ttl will never expire"
            )
        return problems


settings = Settings()
