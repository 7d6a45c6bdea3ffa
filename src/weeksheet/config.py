"""Runtime settings loaded from the environment and ``.env``."""
from __future__ import annotations

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_KEY = "your_key_here"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # AI provider
    AI_PROVIDER: str = ""
    AI_API_KEY: SecretStr | None = None
    OPENAI_API_KEY: SecretStr | None = None
    ANTHROPIC_API_KEY: SecretStr | None = None
    ANTHROPIC_BASE_URL: str | None = None
    OPENAI_MODEL_VISION: str = "gpt-4o"
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    ANTHROPIC_MAX_TOKENS: int = 4096

    # Uploads
    MAX_UPLOAD_SIZE_MB: int = 20

    # Timesheet policy
    DEFAULT_BREAK_MINUTES: int = 30
    PERIOD_POLICY: str = "weekdays"  # "weekdays" (Mon-Fri) or "rolling"
    PERIOD_DAYS: int = 5

    # API / UI
    API_BASE_URL: str = "http://127.0.0.1:8000"
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000

    LOG_LEVEL: str = "INFO"

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def provider_name(self) -> str:
        """Explicit AI_PROVIDER, else anthropic when its key is set, else openai."""
        if self.AI_PROVIDER.strip():
            return self.AI_PROVIDER.strip().lower()
        if _secret(self.ANTHROPIC_API_KEY):
            return "anthropic"
        return "openai"

    def api_key_for(self, provider: str) -> str | None:
        """Resolve the key for *provider*; the .env placeholder counts as missing."""
        key = _secret(self.AI_API_KEY)
        if not key:
            if provider == "anthropic":
                key = _secret(self.ANTHROPIC_API_KEY)
            elif provider == "openai":
                key = _secret(self.OPENAI_API_KEY)
        if not key or key == PLACEHOLDER_KEY:
            return None
        return key


def _secret(value: SecretStr | None) -> str:
    return value.get_secret_value().strip() if value is not None else ""


settings = Settings()
