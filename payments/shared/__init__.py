# Shared Infrastructure for the Receipt Pipeline
"""
Shared infrastructure components for the receipt payment pipeline.

This package provides:
- Pydantic models for S3 events, payment records and stage results
- Tool implementations for Rekognition and the transaction endpoint
- LLM infrastructure for Bedrock integration
- Configuration management
- Custom exceptions
"""

from payments.shared.config import Settings, get_settings, load_settings
from payments.shared.exceptions import (
    ConfigurationError,
    LLMInvocationError,
    LLMParsingError,
    PaymentPipelineError,
    PipelineAbortedError,
    TextExtractionError,
    TransactionDispatchError,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    "load_settings",
    # Exceptions
    "ConfigurationError",
    "LLMInvocationError",
    "LLMParsingError",
    "PaymentPipelineError",
    "PipelineAbortedError",
    "TextExtractionError",
    "TransactionDispatchError",
]
