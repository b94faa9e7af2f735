from functools import lru_cache
import logging
import os
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.tokens.schemas import JWTAlgorithm

logger = logging.getLogger(__name__)


class JWTConfig(BaseModel):
    ALGORITHM: JWTAlgorithm = JWTAlgorithm.HS256

    JWT_SIGNING_KEY: str | None = None
    JWT_VERIFICATION_KEY: str | None = None

    ISSUER: str | None = None
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(15, gt=0)
    INCLUDE_ISSUED_AT: bool = True

    model_config = ConfigDict(extra="ignore")

    @field_validator("JWT_SIGNING_KEY", "JWT_VERIFICATION_KEY", "ISSUER", mode="before")
    @classmethod
    def empty_as_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def signing_key(self) -> bytes | None:
        if self.JWT_SIGNING_KEY is None:
            return None
        return self.JWT_SIGNING_KEY.encode("utf-8")

    @property
    def verification_key(self) -> bytes | None:
        # Symmetric setups reuse the signing key
        key = self.JWT_VERIFICATION_KEY or self.JWT_SIGNING_KEY
        if key is None:
            return None
        return key.encode("utf-8")


class AppConfig(BaseModel):
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    TESTING: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_LEVEL_FILE: str = "WARNING"
    LOG_TO_FILE: bool = False
    LOG_DIR: str | None = None

    PROJECT_NAME: str = "jwt-lifecycle"

    model_config = ConfigDict(extra="ignore")

    @field_validator("LOG_LEVEL", "LOG_LEVEL_FILE")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v!r}")
        return level


class Config(BaseModel):
    app: AppConfig
    jwt: JWTConfig

    model_config = ConfigDict(extra="ignore")


@lru_cache
def get_settings() -> Config:
    """
    Cached settings factory. Override in tests via monkeypatching.
    """
    env_filename = ".env.test" if os.getenv("TESTING") == "true" else ".env"
    env_file_values = dotenv_values(env_filename)
    merged_env: dict[str, Any] = {
        k: v
        for k, v in {**env_file_values, **dict(os.environ)}.items()
        if v is not None
    }

    return Config(
        app=AppConfig(**merged_env),
        jwt=JWTConfig(**merged_env),
    )


config = get_settings()
