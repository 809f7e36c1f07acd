"""Configuration management for coa-engine."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from coa_engine.exceptions import ConfigurationError


@dataclass
class ApiConfig:
    """REST API connection configuration."""

    base_url: str = "http://localhost:3000/api"
    timeout_seconds: float = 30.0
    verify_ssl: bool = True
    headers: dict[str, str] = field(default_factory=dict)

    def to_client_kwargs(self) -> dict[str, Any]:
        """Convert to httpx.AsyncClient keyword arguments."""
        return {
            "base_url": self.base_url.rstrip("/"),
            "timeout": self.timeout_seconds,
            "verify": self.verify_ssl,
            "headers": {"Accept": "application/json", **self.headers},
        }


@dataclass
class EngineConfig:
    """Main configuration for coa-engine."""

    api: ApiConfig = field(default_factory=ApiConfig)
    tenant_id: str | None = None
    log_level: str = "INFO"
    log_format: str = "standard"
    export_dir: Path = field(default_factory=lambda: Path("."))

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        import os

        timeout_str = os.getenv("COA_API_TIMEOUT", "30")
        try:
            timeout = float(timeout_str)
        except ValueError as e:
            raise ConfigurationError(f"COA_API_TIMEOUT is not a number: {timeout_str!r}") from e
        if timeout <= 0:
            raise ConfigurationError(f"COA_API_TIMEOUT must be positive, got {timeout}")

        api = ApiConfig(
            base_url=os.getenv("COA_API_URL", "http://localhost:3000/api"),
            timeout_seconds=timeout,
            verify_ssl=os.getenv("COA_VERIFY_SSL", "true").lower() == "true",
        )

        log_format = os.getenv("LOG_FORMAT", "standard")
        if log_format not in ("standard", "json"):
            raise ConfigurationError(f"LOG_FORMAT must be 'standard' or 'json', got {log_format!r}")

        return cls(
            api=api,
            tenant_id=os.getenv("COA_TENANT_ID") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=log_format,
            export_dir=Path(os.getenv("COA_EXPORT_DIR", ".")),
        )
