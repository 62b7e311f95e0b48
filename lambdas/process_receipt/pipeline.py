"""
Receipt Pipeline

Runs one S3 event record through text detection, payment extraction
and dispatch, applying the configured failure policy per stage.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable

import httpx
import structlog

from payments.shared.config import Settings
from payments.shared.llm.bedrock_client import BedrockLLMClient
from payments.shared.llm.extraction import extract_payment_info
from payments.shared.models.events import S3EventNotification, S3EventRecord
from payments.shared.models.payment import PaymentInfo
from payments.shared.models.results import (
    RecordOutcome,
    RecordStatus,
    StageResult,
)
from payments.shared.tools.rekognition import detect_text
from payments.shared.tools.transactions import derive_user, send_payment_info

log = structlog.get_logger()


@dataclass
class ReceiptPipeline:
    """
    Sequential receipt processing with injected clients.

    Clients are constructed once by the caller and reused across records
    and invocations.
    """

    settings: Settings
    rekognition_client: object
    llm_client: BedrockLLMClient
    http_client: httpx.Client
    today: Callable[[], date] = date.today

    def _resolve_failure(
        self,
        record: S3EventRecord,
        result: StageResult,
        user: str | None = None,
    ) -> RecordOutcome:
        mode = self.settings.failure_mode(result.failure.value)
        fatal = mode == "fatal"

        if fatal:
            log.error(
                "stage_failure_fatal",
                bucket=record.bucket_name,
                key=record.object_key,
                failure=result.failure.value,
                error=result.error_message,
            )
        else:
            log.warning(
                "stage_failure_degraded",
                bucket=record.bucket_name,
                key=record.object_key,
                failure=result.failure.value,
                error=result.error_message,
            )

        return RecordOutcome(
            bucket=record.bucket_name,
            key=record.object_key,
            # A degraded failure before dispatch means nothing was sent
            status=RecordStatus.FAILED if fatal or user is not None else RecordStatus.SKIPPED,
            user=user,
            failure=result.failure,
            fatal=fatal,
            error_message=result.error_message,
        )

    def process_record(self, record: S3EventRecord) -> RecordOutcome:
        """
        Run a single event record through all stages.

        Args:
            record: S3 event record

        Returns:
            RecordOutcome describing what happened to the record
        """
        bucket = record.bucket_name
        key = record.object_key

        log.info("processing_receipt", bucket=bucket, key=key)

        text_result = detect_text(
            self.rekognition_client,
            bucket,
            key,
            mode=self.settings.ocr_text_mode,
            line_break_id=self.settings.ocr_line_break_id,
        )
        if not text_result.ok:
            return self._resolve_failure(record, text_result)

        extraction_result = extract_payment_info(
            self.llm_client,
            text_result.value,
            today=self.today(),
        )
        if not extraction_result.ok:
            return self._resolve_failure(record, extraction_result)

        user = derive_user(key)
        payment_info = PaymentInfo.from_extraction(extraction_result.value, user=user)

        dispatch_result = send_payment_info(
            self.http_client,
            self.settings.create_transaction_endpoint,
            payment_info,
        )
        if not dispatch_result.ok:
            outcome = self._resolve_failure(record, dispatch_result, user=user)
            outcome.payment_info = payment_info.model_dump()
            return outcome

        return RecordOutcome(
            bucket=bucket,
            key=key,
            status=RecordStatus.DISPATCHED,
            user=user,
            payment_info=payment_info.model_dump(),
        )

    def run(self, notification: S3EventNotification) -> list[RecordOutcome]:
        """
        Process the records of a notification in order.

        Each record is isolated: a failure on one record never prevents
        later records from being processed.
        """
        records = notification.records
        if not self.settings.process_all_records and len(records) > 1:
            log.warning(
                "extra_records_ignored",
                record_count=len(records),
                ignored=len(records) - 1,
            )
            records = records[:1]

        return [self.process_record(record) for record in records]
