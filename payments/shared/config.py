"""
Configuration Management

Pydantic-settings based configuration for the receipt payment pipeline.
Settings are read from environment variables without a prefix so the
deployed Lambda variables (MODEL_ID, CREATE_TRANSACTION_ENDPOINT) apply
directly. Required settings are validated when first loaded.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from payments.shared.exceptions import ConfigurationError

FailureMode = Literal["fatal", "degrade"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are case-insensitive.
    Example: MODEL_ID=us.deepseek.r1-v1:0
    """

    model_config = SettingsConfigDict(
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        env_parse_none_str="none",
        protected_namespaces=(),
        case_sensitive=False,
        extra="ignore",
    )

    # Required
    model_id: str = Field(
        ...,
        min_length=1,
        description="AWS Bedrock model ID used for payment extraction",
    )
    create_transaction_endpoint: str = Field(
        ...,
        min_length=1,
        description="URL receiving the extracted payment info as JSON",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-east-1",
        description="AWS region for Rekognition and Bedrock",
    )
    rekognition_endpoint_url: str | None = Field(
        default=None,
        description="Rekognition endpoint URL (for local development)",
    )
    bedrock_endpoint_url: str | None = Field(
        default=None,
        description="Bedrock runtime endpoint URL (for VPC endpoints or local testing)",
    )

    # LLM Parameters
    llm_max_tokens: int = Field(
        default=512,
        gt=0,
        description="Maximum tokens for the model reply",
    )
    llm_temperature: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Sampling temperature (lower = more deterministic)",
    )
    llm_max_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts for a Bedrock invocation; 1 disables retry",
    )

    # OCR Configuration
    ocr_text_mode: Literal["all", "lines"] = Field(
        default="all",
        description="'all' joins every detection, 'lines' joins LINE detections only",
    )
    ocr_line_break_id: int | None = Field(
        default=15,
        description="Detection id followed by a line break in 'all' mode (empty or 'none' disables)",
    )

    # Pipeline Configuration
    process_all_records: bool = Field(
        default=True,
        description="Process every record of a notification instead of the first only",
    )
    dispatch_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        description="Timeout for the transaction endpoint POST",
    )
    ocr_failure_mode: FailureMode = Field(default="fatal")
    llm_failure_mode: FailureMode = Field(default="fatal")
    parse_failure_mode: FailureMode = Field(default="degrade")
    dispatch_failure_mode: FailureMode = Field(default="degrade")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("ocr_line_break_id", mode="before")
    @classmethod
    def _empty_line_break_disables(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("create_transaction_endpoint")
    @classmethod
    def _check_endpoint_scheme(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("must be an http:// or https:// URL")
        return value

    @property
    def rekognition_config(self) -> dict:
        """Rekognition client configuration."""
        config = {"region_name": self.aws_region}
        if self.rekognition_endpoint_url:
            config["endpoint_url"] = self.rekognition_endpoint_url
        return config

    @property
    def bedrock_config(self) -> dict:
        """Bedrock runtime client configuration."""
        config = {"region_name": self.aws_region}
        if self.bedrock_endpoint_url:
            config["endpoint_url"] = self.bedrock_endpoint_url
        return config

    def failure_mode(self, kind: str) -> FailureMode:
        """Return the configured failure mode for a stage failure kind."""
        modes = {
            "ocr_error": self.ocr_failure_mode,
            "llm_error": self.llm_failure_mode,
            "llm_parse_error": self.parse_failure_mode,
            "dispatch_error": self.dispatch_failure_mode,
        }
        return modes.get(kind, "fatal")


def load_settings(**overrides) -> Settings:
    """
    Build and validate settings, raising ConfigurationError on failure.

    Args:
        **overrides: Explicit values taking precedence over the environment

    Raises:
        ConfigurationError: If a required setting is missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            fields=fields,
            error_message="; ".join(err["msg"] for err in e.errors()),
        ) from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once per container.
    Call get_settings.cache_clear() in tests after changing the environment.
    """
    return load_settings()
