"""
ProcessReceipt Lambda Handler

Main entry point for receipt images uploaded to S3.

Trigger: S3 ObjectCreated notification
Output: POST of the extracted payment info to CREATE_TRANSACTION_ENDPOINT

Flow:
1. Validate settings (fails before any remote call)
2. Parse the S3 notification records
3. Detect text in each image with Rekognition
4. Extract amount, payment date and institution with Bedrock
5. Derive the user from the object key and POST the record
"""

import json
import logging
import time
from functools import lru_cache
from typing import Any

import structlog
from pydantic import ValidationError

from lambdas.process_receipt.pipeline import ReceiptPipeline
from payments.shared.config import Settings, get_settings
from payments.shared.exceptions import PipelineAbortedError
from payments.shared.llm.bedrock_client import (
    BedrockLLMClient,
    create_bedrock_runtime_client,
)
from payments.shared.models.events import S3EventNotification
from payments.shared.tools.rekognition import create_rekognition_client
from payments.shared.tools.transactions import create_http_client

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()


@lru_cache(maxsize=1)
def get_pipeline() -> ReceiptPipeline:
    """
    Build the receipt pipeline once per Lambda container.

    Raises:
        ConfigurationError: If required settings are missing
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level)
    return build_pipeline(settings)


def build_pipeline(settings: Settings) -> ReceiptPipeline:
    """Construct the pipeline and its clients from settings."""
    return ReceiptPipeline(
        settings=settings,
        rekognition_client=create_rekognition_client(settings),
        llm_client=BedrockLLMClient(create_bedrock_runtime_client(settings), settings),
        http_client=create_http_client(settings),
    )


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda entry point for receipt processing.

    Args:
        event: S3 event notification
        context: Lambda execution context

    Returns:
        Processing summary with one entry per processed record

    Raises:
        ConfigurationError: If required settings are missing or invalid
        ValidationError: If the event is not an S3 notification
        PipelineAbortedError: If any record failed with a fatal stage failure
    """
    start_time = time.time()
    pipeline = get_pipeline()

    try:
        notification = S3EventNotification.model_validate(event)
    except ValidationError as e:
        log.error("invalid_s3_event", error=str(e))
        raise

    log.info("lambda_invoked", record_count=len(notification.records))

    outcomes = pipeline.run(notification)

    duration_ms = int((time.time() - start_time) * 1000)
    fatal = [outcome for outcome in outcomes if outcome.fatal]

    if fatal:
        log.error(
            "receipt_pipeline_aborted",
            failed_keys=[outcome.key for outcome in fatal],
            duration_ms=duration_ms,
        )
        raise PipelineAbortedError(
            failed_keys=[outcome.key for outcome in fatal],
            failure_kinds=[outcome.failure.value for outcome in fatal],
        )

    log.info(
        "receipts_processed",
        records=len(outcomes),
        statuses=[outcome.status.value for outcome in outcomes],
        duration_ms=duration_ms,
    )

    return {
        "statusCode": 200,
        "body": json.dumps({
            "status": "success",
            "records": [outcome.to_dict() for outcome in outcomes],
            "duration_ms": duration_ms,
        }),
    }
