from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    # Hugging Face (hosted inference via HuggingFaceEndpoint + ChatHuggingFace)
    # Requires a token (free tier works with rate limits).
    hf_token: str | None = Field(default=None, validation_alias="HUGGINGFACEHUB_API_TOKEN")
    hf_endpoint_model: str = "Qwen/Qwen2.5-1.5B-Instruct"
    hf_temperature: float = 0.2
    hf_max_new_tokens: int = 400
    hf_timeout_seconds: int = 30

    # Suggestions
    keyword_fallback_enabled: bool = True


settings = Settings()
