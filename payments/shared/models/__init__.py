"""
Pydantic and dataclass models shared by the receipt pipeline.
"""

from payments.shared.models.events import (
    S3Bucket,
    S3EventNotification,
    S3EventRecord,
    S3Object,
)
from payments.shared.models.payment import PaymentExtraction, PaymentInfo
from payments.shared.models.results import (
    FailureKind,
    RecordOutcome,
    RecordStatus,
    StageResult,
)

__all__ = [
    "S3Bucket",
    "S3EventNotification",
    "S3EventRecord",
    "S3Object",
    "PaymentExtraction",
    "PaymentInfo",
    "FailureKind",
    "RecordOutcome",
    "RecordStatus",
    "StageResult",
]
