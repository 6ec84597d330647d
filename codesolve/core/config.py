from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    database_url: str

    # Image upload limits
    max_image_bytes: int = 10 * 1024 * 1024

    # Local OCR (Tesseract)
    ocr_language: str = "eng"
    local_ocr_timeout_seconds: float = 10.0

    # Remote OCR (OCR.space) — only attempted when ocr_space_api_key is set
    ocr_space_api_key: str | None = None
    ocr_space_url: str = "https://api.ocr.space/parse/image"
    remote_ocr_timeout_seconds: float = 15.0

    # Cosmetic delay before returning canned problem text
    placeholder_delay_seconds: float = 0.0

    # Solution generation
    openai_api_key: str | None = None
    llm_model: str = "gpt-4o-mini"
    anthropic_api_key: str | None = None
    anthropic_model: str = "claude-3-5-sonnet-latest"


settings = Settings()
