from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Settings:
    """Container for environment-driven settings."""

    api_key: str | None
    assistant_id: str | None
    vector_store_id: str | None
    form_id: str | None
    api_base: str = "https://api.openai.com/v1"
    beta_header: str = "assistants=v2"
    file_purpose: str = "assistants"
    request_timeout: float = 30.0
    upload_timeout: float = 60.0
    poll_interval: float = 5.0
    poll_max_attempts: int = 20
    store_max_retries: int = 3
    store_retry_delay: float = 1.0
    forms_url: str | None = None
    forms_consumer_key: str | None = None
    forms_consumer_secret: str | None = None
    log_level: str = "INFO"
    log_format: str = "console"
    cors_origins: list[str] = field(default_factory=list)

    def missing_batch_settings(self) -> list[str]:
        """Names of the settings a batch run cannot start without."""

        required = {
            "OPENAI_API_KEY": self.api_key,
            "ONE_LINERS_ASSISTANT_ID": self.assistant_id,
            "ONE_LINERS_VECTOR_STORE_ID": self.vector_store_id,
            "ONE_LINERS_FORM_ID": self.form_id,
        }
        return [name for name, value in required.items() if not value]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    return int(raw)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    return float(raw)


def load_settings() -> Settings:
    """Load settings from the current environment."""

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    return Settings(
        api_key=os.getenv("OPENAI_API_KEY") or None,
        assistant_id=os.getenv("ONE_LINERS_ASSISTANT_ID") or None,
        vector_store_id=os.getenv("ONE_LINERS_VECTOR_STORE_ID") or None,
        form_id=os.getenv("ONE_LINERS_FORM_ID") or None,
        api_base=os.getenv("OPENAI_API_BASE") or "https://api.openai.com/v1",
        beta_header=os.getenv("OPENAI_BETA") or "assistants=v2",
        file_purpose=os.getenv("ONE_LINERS_FILE_PURPOSE") or "assistants",
        request_timeout=_float_env("OPENAI_TIMEOUT", 30.0),
        upload_timeout=_float_env("OPENAI_UPLOAD_TIMEOUT", 60.0),
        poll_interval=_float_env("ONE_LINERS_POLL_INTERVAL", 5.0),
        poll_max_attempts=_int_env("ONE_LINERS_POLL_MAX_ATTEMPTS", 20),
        store_max_retries=_int_env("ONE_LINERS_STORE_MAX_RETRIES", 3),
        store_retry_delay=_float_env("ONE_LINERS_STORE_RETRY_DELAY", 1.0),
        forms_url=os.getenv("GRAVITY_FORMS_URL") or None,
        forms_consumer_key=os.getenv("GRAVITY_FORMS_CONSUMER_KEY") or None,
        forms_consumer_secret=os.getenv("GRAVITY_FORMS_CONSUMER_SECRET") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "console"),
        cors_origins=origins,
    )
