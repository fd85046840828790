from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

from summary_assistant.constants import (
    DEFAULT_SYSTEM_PROMPT,
    Endpoints,
    Limits,
    Models,
    RequestDefaults,
)
from summary_assistant.summarizer.models_catalog import (
    base_model,
    is_fine_tuned,
    is_supported_model,
)


class Settings(BaseSettings):
    """
    Centralized application settings leveraging environment overrides.

    Every component receives the instance it should use through its
    constructor; nothing reads settings from module state.
    """

    app_name: str = "Summary Assistant"
    environment: str = Field("local")
    log_level: str = "INFO"
    debug_mode: bool = False

    # LLM settings
    api_key: str = Field(
        "",
        repr=False,
        validation_alias=AliasChoices(
            "SUMMARY_ASSISTANT_API_KEY", "OPENAI_API_KEY", "api_key"
        ),
    )
    model: str = Field(Models.DEFAULT_MODEL, description="Base or fine-tuned model id")
    word_limit: int = Field(
        Limits.DEFAULT_WORD_LIMIT, ge=Limits.MIN_WORD_LIMIT, le=Limits.MAX_WORD_LIMIT
    )
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    chat_completions_url: str = Endpoints.CHAT_COMPLETIONS
    responses_url: str = Endpoints.RESPONSES
    api_timeout: float = Field(RequestDefaults.API_TIMEOUT_SECONDS, gt=0)
    max_tokens: int = Field(RequestDefaults.MAX_TOKENS, ge=1)
    temperature: float = Field(RequestDefaults.TEMPERATURE, ge=0.0, le=2.0)

    # Acceptance loop
    max_retry_attempts: int = Field(Limits.MAX_RETRY_ATTEMPTS, ge=1)
    min_response_ratio: float = Field(Limits.MIN_RESPONSE_RATIO, ge=0.0, le=1.0)
    min_word_count: int = Field(Limits.MIN_WORD_COUNT, ge=0)

    # Rate limiting
    rate_limit_max_requests: int = Field(Limits.RATE_LIMIT_MAX_REQUESTS, ge=1)
    rate_limit_window: int = Field(Limits.RATE_LIMIT_WINDOW_SECONDS, ge=1)

    # Audit / export
    export_ttl_seconds: int = Field(Limits.EXPORT_TTL_SECONDS, ge=1)
    data_file: Optional[str] = Field(
        None, description="YAML file used to seed the post repository"
    )

    class Config:
        env_prefix = "SUMMARY_ASSISTANT_"
        env_file = ".env"
        case_sensitive = False

    @field_validator("model")
    @classmethod
    def validate_model(cls, value: str) -> str:
        value = value.strip()
        if is_fine_tuned(value) and not is_supported_model(value):
            raise ValueError(
                f"Fine-tuned model '{value}' is based on '{base_model(value)}', "
                "which cannot be fine-tuned"
            )
        if not is_supported_model(value):
            supported = ", ".join(Models.SUPPORTED_BASE_MODELS)
            raise ValueError(f"Unsupported model '{value}'. Supported: {supported}")
        return value

    @field_validator("system_prompt")
    @classmethod
    def default_blank_prompt(cls, value: str) -> str:
        return value if value and value.strip() else DEFAULT_SYSTEM_PROMPT


@lru_cache
def get_settings() -> Settings:
    return Settings()
