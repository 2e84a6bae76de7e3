"""
Runtime configuration.

Values come from environment variables. A `.env` file in the working directory is loaded first (if present),
so local development does not need exported variables.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 4000
    client_origin: str = "http://localhost:5173"
    log_level: str = "INFO"
    # No URL means rooms only live in memory for the lifetime of the process
    database_url: Optional[str] = None
    database_echo: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            host=os.environ.get("HOST", cls.host),
            port=int(os.environ.get("PORT", cls.port)),
            client_origin=os.environ.get("CLIENT_ORIGIN", cls.client_origin),
            log_level=os.environ.get("LOG_LEVEL", cls.log_level).upper(),
            database_url=os.environ.get("DATABASE_URL") or None,
            database_echo=os.environ.get("DATABASE_ECHO", "").lower() in TRUTHY,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
