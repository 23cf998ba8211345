"""
Configuration Settings.
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import List, Optional

from ..errors import ConfigurationError


class Settings(BaseSettings):
    """Application settings."""

    # App info
    app_name: str = "DocRelay"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000

    # LLM endpoint (HF_* names are the ones older deployments use)
    llm_provider: str = "huggingface"  # "huggingface" or "openai"
    llm_api_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("llm_api_url", "hf_api_url")
    )
    llm_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("llm_api_key", "hf_api_key")
    )
    llm_model: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("llm_model", "model_name")
    )
    llm_timeout: float = 30.0  # seconds, applies to every completion call
    llm_temperature: float = 0.3
    llm_max_tokens: int = 1024

    # Document limits
    max_upload_chars: int = 100_000
    max_upload_bytes: int = 20 * 1024 * 1024  # 20 MB
    classifier_context_chars: int = 4_000

    # Shared corpus loaded once at startup (disabled when unset)
    corpus_dir: Optional[str] = None
    max_corpus_chars: int = 8_000

    # CORS
    cors_origins: List[str] = ["*"]

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file_path: str = "./logs/docrelay.log"
    log_file_enabled: bool = False
    log_console_enabled: bool = True
    log_json_format: bool = True  # JSON format for files, human-readable for console
    log_api_requests: bool = True  # Log all HTTP requests/responses

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    def validate_required(self) -> None:
        """
        Ensure the values the service cannot run without are present.

        Raises:
            ConfigurationError: listing every missing setting
        """
        missing = []
        if not self.llm_api_url:
            missing.append("LLM_API_URL (or HF_API_URL)")
        if not self.llm_api_key:
            missing.append("LLM_API_KEY (or HF_API_KEY)")
        if not self.llm_model:
            missing.append("LLM_MODEL (or MODEL_NAME)")
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )


settings = Settings()
