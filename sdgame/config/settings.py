"""
Application Settings

Environment configuration for the application.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from sdgame.domain.errors import InvalidInputError


@dataclass
class Settings:
    """Application settings from environment."""

    log_level: str = "INFO"
    scenario_file: Optional[str] = None
    pass_threshold: float = 80.0
    cors_origins: str = "*"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        raw_threshold = os.getenv("SDGAME_PASS_THRESHOLD", "80")
        try:
            threshold = float(raw_threshold)
        except ValueError:
            raise InvalidInputError(
                f"SDGAME_PASS_THRESHOLD must be numeric, got {raw_threshold!r}",
                details={"variable": "SDGAME_PASS_THRESHOLD"},
            )
        return cls(
            log_level=os.getenv("SDGAME_LOG_LEVEL", "INFO").upper(),
            scenario_file=os.getenv("SDGAME_SCENARIO_FILE") or None,
            pass_threshold=threshold,
            cors_origins=os.getenv("SDGAME_CORS_ORIGINS", "*"),
        )
