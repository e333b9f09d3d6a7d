"""Centralised settings for stayscout.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Target site
    # ------------------------------------------------------------------
    base_url: str = field(
        default_factory=lambda: os.environ.get("AIRBNB_BASE_URL", "https://www.airbnb.ca")
    )
    ignore_robots_txt: bool = field(
        default_factory=lambda: _env_flag("IGNORE_ROBOTS_TXT")
    )

    # ------------------------------------------------------------------
    # Request pacing
    # ------------------------------------------------------------------
    request_delay_min: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_DELAY_MIN", "0.1"))
    )
    request_delay_jitter: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_DELAY_JITTER", "0.2"))
    )
    navigation_delay_min: float = field(
        default_factory=lambda: float(os.environ.get("NAVIGATION_DELAY_MIN", "0.5"))
    )
    navigation_delay_jitter: float = field(
        default_factory=lambda: float(os.environ.get("NAVIGATION_DELAY_JITTER", "1.0"))
    )

    # ------------------------------------------------------------------
    # HTTP client
    # ------------------------------------------------------------------
    max_redirects: int = field(
        default_factory=lambda: int(os.environ.get("MAX_REDIRECTS", "5"))
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )


# Module-level singleton, import this everywhere:
#   from stayscout.config import settings
settings = Settings()
