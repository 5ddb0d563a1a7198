import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from utils.errors import ConfigurationError

KEY_LENGTH = 32  # AES-256
IV_LENGTH = 16  # AES block size
DEFAULT_PORT = 3000
DEFAULT_SEED_CODE_COUNT = 10


class Settings(BaseModel):
    """Process-wide configuration. Built once at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    database_url: str
    encryption_key: bytes
    encryption_iv: bytes
    openai_api_key: str
    port: int = DEFAULT_PORT
    seed_code_count: int = DEFAULT_SEED_CODE_COUNT

    @field_validator("encryption_key", "encryption_iv", mode="before")
    @classmethod
    def _decode_hex(cls, value, info):
        expected = KEY_LENGTH if info.field_name == "encryption_key" else IV_LENGTH
        if isinstance(value, str):
            try:
                value = bytes.fromhex(value.strip())
            except ValueError:
                raise ValueError(f"{info.field_name} must be hex encoded")
        if len(value) != expected:
            raise ValueError(f"{info.field_name} must be {expected} bytes, got {len(value)}")
        return value

    @field_validator("database_url", "openai_api_key")
    @classmethod
    def _not_blank(cls, value, info):
        if not value or not value.strip():
            raise ValueError(f"{info.field_name} must not be empty")
        return value

    @field_validator("seed_code_count")
    @classmethod
    def _positive_count(cls, value):
        if value < 1:
            raise ValueError("seed_code_count must be at least 1")
        return value

    @classmethod
    def from_env(cls, dotenv_path=None) -> "Settings":
        """
        Build settings from the environment (and an optional .env file).

        Raises:
            ConfigurationError: a required variable is missing or malformed
        """
        load_dotenv(dotenv_path=dotenv_path)

        required = {
            "database_url": "DATABASE_URL",
            "encryption_key": "ENCRYPTION_KEY",
            "encryption_iv": "ENCRYPTION_IV",
            "openai_api_key": "OPENAI_API_KEY",
        }
        values = {}
        missing = []
        for field, env_name in required.items():
            value = os.getenv(env_name)
            if not value:
                missing.append(env_name)
            values[field] = value
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        optional = {"port": "PORT", "seed_code_count": "SEED_CODE_COUNT"}
        for field, env_name in optional.items():
            value = os.getenv(env_name)
            if value:
                values[field] = value

        try:
            return cls(**values)
        except ValidationError as e:
            errors = "; ".join(err["msg"] for err in e.errors())
            raise ConfigurationError(f"Invalid configuration: {errors}") from e


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
