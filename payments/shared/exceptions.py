"""
Custom Exceptions for the Receipt Payment Pipeline

All exceptions carry a message plus the context needed for debugging
and structured logging.
"""

from dataclasses import dataclass
from typing import Any


class PaymentPipelineError(Exception):
    """Base exception for the receipt payment pipeline."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class ConfigurationError(PaymentPipelineError):
    """Required configuration is missing or invalid."""

    fields: list[str]

    def __init__(self, fields: list[str], error_message: str | None = None) -> None:
        self.fields = fields
        super().__init__(
            f"Invalid configuration for {', '.join(fields) or 'settings'}: "
            f"{error_message or 'Unknown error'}",
            fields=fields,
        )


@dataclass
class TextExtractionError(PaymentPipelineError):
    """Rekognition text detection failed for an image."""

    bucket: str
    key: str

    def __init__(
        self,
        bucket: str,
        key: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(
            f"Text detection failed for s3://{bucket}/{key}: "
            f"{error_message or 'Unknown error'}",
            bucket=bucket,
            key=key,
            error_code=error_code,
        )


class LLMInvocationError(PaymentPipelineError):
    """Raised when the Bedrock model invocation fails."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class LLMParsingError(PaymentPipelineError):
    """Raised when model output cannot be parsed into payment fields."""

    def __init__(self, message: str, raw_output: str | None = None):
        super().__init__(message)
        self.raw_output = raw_output


@dataclass
class TransactionDispatchError(PaymentPipelineError):
    """Sending payment info to the transaction endpoint failed."""

    endpoint: str
    status_code: int | None = None
    response_body: str | None = None

    def __init__(
        self,
        endpoint: str,
        status_code: int | None = None,
        reason: str | None = None,
        response_body: str | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(
            f"Failed to send payment info: {reason or 'Unknown error'}. "
            f"Response: {response_body or ''}",
            endpoint=endpoint,
            status_code=status_code,
        )


@dataclass
class PipelineAbortedError(PaymentPipelineError):
    """One or more records failed with a fatal stage failure."""

    failed_keys: list[str]

    def __init__(self, failed_keys: list[str], failure_kinds: list[str]) -> None:
        self.failed_keys = failed_keys
        super().__init__(
            f"Receipt pipeline aborted for {len(failed_keys)} record(s)",
            failed_keys=failed_keys,
            failure_kinds=failure_kinds,
        )
