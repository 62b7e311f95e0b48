"""
Stage Result Models

Tagged outcomes returned by each pipeline stage. Stages never raise for
provider failures; they return a failed StageResult and the pipeline
decides from configuration whether the failure is fatal.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class FailureKind(str, Enum):
    """Kind of stage failure."""

    OCR_ERROR = "ocr_error"
    LLM_ERROR = "llm_error"
    LLM_PARSE_ERROR = "llm_parse_error"
    DISPATCH_ERROR = "dispatch_error"


class RecordStatus(str, Enum):
    """Final status of a processed event record."""

    DISPATCHED = "dispatched"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of a single pipeline stage."""

    value: T | None = None
    failure: FailureKind | None = None
    error_message: str | None = None
    error: Exception | None = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, kind: FailureKind, error: Exception) -> "StageResult[T]":
        return cls(failure=kind, error_message=str(error), error=error)


@dataclass
class RecordOutcome:
    """Summary of one event record run through the pipeline."""

    bucket: str
    key: str
    status: RecordStatus
    user: str | None = None
    failure: FailureKind | None = None
    fatal: bool = False
    error_message: str | None = None
    payment_info: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "bucket": self.bucket,
            "key": self.key,
            "status": self.status.value,
            "user": self.user,
            "failure": self.failure.value if self.failure else None,
            "fatal": self.fatal,
            "error": self.error_message,
            "payment_info": self.payment_info,
        }
