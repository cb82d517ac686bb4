# omwx/settings.py
"""
Service settings.

Operational thresholds (visibility bands, crosswind limits, ...) are code
constants in the policy and signals modules, not configuration.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, List

# Load .env file
from dotenv import load_dotenv
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    """Service configuration."""

    # Reference data
    runways_path: Optional[str] = os.getenv("RUNWAYS_PATH")  # runways.json or OurAirports runways.csv
    minima_path: Optional[str] = os.getenv("MINIMA_PATH")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = _env_bool("LOG_JSON", "true")

    # Batch evaluation
    batch_max_workers: int = int(os.getenv("BATCH_MAX_WORKERS", "8"))

    # API settings
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    allowed_origins: List[str] = field(
        default_factory=lambda: _env_list("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:8000")
    )


# Global settings instance
settings = Settings()
