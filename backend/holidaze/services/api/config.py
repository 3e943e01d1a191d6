"""Holidaze API config. Credentials from env (HOLIDAZE_API_KEY, HOLIDAZE_API_BASE_URL) or ApiConfig args."""
import os
from pathlib import Path

from dotenv import load_dotenv

from holidaze.core.constants import API_KEY_HEADER

_ENV_PATH = Path(__file__).resolve().parent.parent.parent.parent / ".env"
load_dotenv(_ENV_PATH)

DEFAULT_BASE_URL = "https://v2.api.noroff.dev"
DEFAULT_TIMEOUT_SECONDS = 20.0


def _env(key: str, default: str = "") -> str:
    return (os.getenv(key) or default).strip()


class ApiConfig:
    """Base URL, API key and request timeout for the Holidaze API."""

    __slots__ = ("api_key", "base_url", "timeout")

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.api_key = (api_key if api_key is not None else _env("HOLIDAZE_API_KEY")).strip()
        self.base_url = (base_url or _env("HOLIDAZE_API_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.timeout = timeout

    def headers(self, access_token: str | None = None) -> dict[str, str]:
        """JSON headers plus the API key and bearer token when present."""
        h = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key:
            h[API_KEY_HEADER] = self.api_key
        if access_token:
            h["Authorization"] = f"Bearer {access_token}"
        return h

    @classmethod
    def from_settings(cls, settings) -> "ApiConfig":
        return cls(
            api_key=settings.api_key,
            base_url=settings.api_base_url,
            timeout=settings.request_timeout_seconds,
        )
