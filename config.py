import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODEL = "gemini-3-flash-preview"
API_KEY_ENV_VARS = ("API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")


class Settings(BaseModel):
    """Process-wide configuration, built once at startup and never mutated."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(default="", description="Gemini API key")
    api_key_source: str | None = Field(default=None, description="Env var the key was read from")
    model: str = Field(default=DEFAULT_MODEL, description="Gemini model name")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    log_level: str = Field(default="INFO")
    request_timeout_seconds: float = Field(default=60.0, gt=0)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)


def _resolve_api_key() -> tuple[str, str | None]:
    for name in API_KEY_ENV_VARS:
        value = (os.getenv(name) or "").strip()
        if value:
            return value, name
    return "", None


def load_settings() -> Settings:
    load_dotenv()
    api_key, source = _resolve_api_key()
    return Settings(
        api_key=api_key,
        api_key_source=source,
        model=os.getenv("AI_MODEL") or DEFAULT_MODEL,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT") or 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        request_timeout_seconds=float(os.getenv("AI_REQUEST_TIMEOUT") or 60),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
