"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env next to backend/ (parent of holidaze/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    api_base_url: str = "https://v2.api.noroff.dev"
    # HOLIDAZE_API_KEY in .env (Noroff dashboard)
    api_key: str = ""
    # HOLIDAZE_ACCESS_TOKEN / HOLIDAZE_PROFILE_NAME: printed by `holidaze login`
    access_token: str = ""
    profile_name: str = ""
    venue_manager: bool = False
    request_timeout_seconds: float = 20.0
    # Upper bound for one gateway call inside a booking mutation
    mutation_timeout_seconds: float = 30.0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=_env_path,
        env_prefix="HOLIDAZE_",
        extra="ignore",
    )

    @field_validator("api_base_url", "api_key", "access_token", "profile_name", mode="after")
    @classmethod
    def strip_values(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()


settings = Settings()
