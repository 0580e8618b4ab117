"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "anchor-ai"
    debug: bool = False
    log_level: str = "INFO"

    # Gemini LLM
    gemini_model: str = "gemini-1.5-flash"
    gemini_temperature: float = 0.3
    gemini_max_output_tokens: int = 1024
    llm_timeout_seconds: float = 20.0

    # Prompt versioning for decision-log observability
    prompt_version: str = "core_v1.0"

    # Context windows (days)
    completion_window_days: int = 14
    analytics_window_days: int = 7
    consistency_window_days: int = 7

    # Decision history endpoint
    decision_history_default_limit: int = 10
    decision_history_max_limit: int = 100

    model_config = {"env_prefix": "ANCHOR_"}


settings = Settings()
