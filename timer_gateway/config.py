"""Configuration - timer gateway settings"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
load_dotenv()


@dataclass
class Settings:
    """Service settings"""

    # Server
    host: str = "0.0.0.0"
    port: int = 8790
    debug: bool = False
    log_level: str = "INFO"

    # Timers
    tick_rate_ms: int = 96
    json_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables"""
        json_path = os.getenv("TIMERS_JSON_PATH")

        return cls(
            # Server
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8790")),
            debug=os.getenv("DEBUG", "").lower() in ("1", "true"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),

            # Timers
            tick_rate_ms=int(os.getenv("TIMERS_TICK_RATE_MS", "96")),
            json_path=Path(json_path).expanduser() if json_path else None,
        )


# Global settings instance
settings = Settings.from_env()
