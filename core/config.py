"""
core/config.py -- Vinyl Store settings, read from the environment and .env.

get_settings() is the only entry point; modules never read os.environ
themselves. Each field maps to the upper-cased environment variable of the
same name (mongo_uri -> MONGO_URI, bcrypt_rounds -> BCRYPT_ROUNDS).

SECRET_KEY policy, enforced when Settings is built:
  DEBUG=true   a random key is generated and a warning logged; tokens are
               invalidated by every restart.
  otherwise    a missing key stops the process.
  always       keys under 32 characters are rejected.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or catalog/.
"""

import logging
import secrets
from datetime import datetime, timezone
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("vinylstore.config")

APP_VERSION = "1.0.0"

_MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Runtime configuration. Every field has a default except the secret in production."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # -- general ---------------------------------------------------------

    debug: bool = False
    log_level: str = "INFO"
    secret_key: str = ""  # "" means unset; replaced or rejected below

    # -- accounts --------------------------------------------------------

    token_expire_seconds: int = 6 * 3600
    # bcrypt cost factor. 4 is the library minimum.
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # -- MongoDB ---------------------------------------------------------

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "vinylstore"
    mongo_timeout_ms: int = 5000

    # -- HTTP ------------------------------------------------------------

    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        if not self.secret_key:
            if not self.debug:
                raise ValueError("SECRET_KEY must be set unless DEBUG=true (set it in the environment or .env).")
            self.secret_key = secrets.token_hex(_MIN_SECRET_LENGTH)
            logger.warning("SECRET_KEY not set; generated a temporary one for this DEBUG run.")
        if len(self.secret_key) < _MIN_SECRET_LENGTH:
            raise ValueError(f"SECRET_KEY must be at least {_MIN_SECRET_LENGTH} characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Build Settings on first call and return the same instance afterwards.

    Tests that change the environment must call get_settings.cache_clear().
    """
    return Settings()


def now_iso() -> str:
    """Current UTC time as an ISO 8601 string. Used for createdAt/updatedAt."""
    return datetime.now(timezone.utc).isoformat()
