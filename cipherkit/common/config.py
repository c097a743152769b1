"""Runtime settings read from the environment (and a ``.env`` file if present).

Recognised variables:
- CIPHERKIT_LOG_LEVEL: level used by the command-line tool (default WARNING)
- CIPHERKIT_STRICT_PADDING: verify every PKCS#7 padding byte by default
- CIPHERKIT_ALLOW_LEGACY: allow the deprecated key-as-IV helpers
- CIPHERKIT_DEFAULT_PADDING: padding used by ECB/CBC when none is given
"""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    log_level: str = Field(default="WARNING")
    strict_padding: bool = Field(default=False, description="Use strict PKCS#7 unpadding by default")
    allow_legacy: bool = Field(default=True, description="Allow key-as-IV legacy helpers")
    default_padding: str = Field(default="pkcs7")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return v

    @field_validator("default_padding")
    @classmethod
    def _lower_padding(cls, v: str) -> str:
        return v.strip().lower()


def _bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "y", "on"}


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    load_dotenv()

    return Settings(
        log_level=os.getenv("CIPHERKIT_LOG_LEVEL", "WARNING"),
        strict_padding=_bool("CIPHERKIT_STRICT_PADDING", False),
        allow_legacy=_bool("CIPHERKIT_ALLOW_LEGACY", True),
        default_padding=os.getenv("CIPHERKIT_DEFAULT_PADDING", "pkcs7"),
    )
