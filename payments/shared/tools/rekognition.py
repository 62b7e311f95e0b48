"""
Rekognition Tools

Text detection for receipt images stored in S3.
"""

from typing import Any, Literal

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from payments.shared.config import Settings
from payments.shared.exceptions import TextExtractionError
from payments.shared.models.results import FailureKind, StageResult

log = structlog.get_logger()


def create_rekognition_client(settings: Settings):
    """Create a Rekognition client from settings."""
    return boto3.client("rekognition", **settings.rekognition_config)


def _detection_id(detection: dict[str, Any]) -> int | None:
    # Rekognition returns "Id"; hand-built fixtures sometimes use "id"
    if "Id" in detection:
        return detection["Id"]
    return detection.get("id")


def build_extracted_text(
    detections: list[dict[str, Any]],
    *,
    mode: Literal["all", "lines"] = "all",
    line_break_id: int | None = 15,
) -> str:
    """
    Concatenate detected text fragments into a single string.

    In "all" mode every fragment is followed by a single space, in the order
    Rekognition returned them, and the fragment whose id equals
    ``line_break_id`` is additionally followed by a newline.

    In "lines" mode only LINE detections are used, one per line.

    Args:
        detections: TextDetections list from a DetectText response
        mode: Concatenation mode
        line_break_id: Detection id followed by a newline ("all" mode only)

    Returns:
        Extracted text
    """
    if mode == "lines":
        return "\n".join(
            d.get("DetectedText", "") for d in detections if d.get("Type") == "LINE"
        )

    parts: list[str] = []
    for detection in detections:
        parts.append(f"{detection.get('DetectedText', '')} ")
        if line_break_id is not None and _detection_id(detection) == line_break_id:
            parts.append("\n")
    return "".join(parts)


def detect_text(
    client,
    bucket: str,
    key: str,
    *,
    mode: Literal["all", "lines"] = "all",
    line_break_id: int | None = 15,
) -> StageResult[str]:
    """
    Detect text in an S3-hosted image.

    Args:
        client: boto3 Rekognition client
        bucket: S3 bucket name
        key: S3 object key
        mode: Concatenation mode, see build_extracted_text
        line_break_id: Detection id followed by a newline

    Returns:
        StageResult holding the extracted text, or an ocr_error failure
    """
    log.info("detecting_text", bucket=bucket, key=key)

    try:
        response = client.detect_text(
            Image={
                "S3Object": {
                    "Bucket": bucket,
                    "Name": key,
                },
            }
        )
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code")
        error_msg = e.response.get("Error", {}).get("Message")
        log.error(
            "text_detection_failed",
            bucket=bucket,
            key=key,
            error_code=error_code,
            error_message=error_msg,
        )
        return StageResult.failed(
            FailureKind.OCR_ERROR,
            TextExtractionError(bucket, key, error_code=error_code, error_message=error_msg),
        )
    except BotoCoreError as e:
        log.error("text_detection_failed", bucket=bucket, key=key, error=str(e))
        return StageResult.failed(
            FailureKind.OCR_ERROR,
            TextExtractionError(bucket, key, error_message=str(e)),
        )

    detections = response.get("TextDetections", [])
    extracted_text = build_extracted_text(detections, mode=mode, line_break_id=line_break_id)

    log.info(
        "ocr_text_extracted",
        bucket=bucket,
        key=key,
        detection_count=len(detections),
        extracted_text=extracted_text,
    )

    return StageResult.success(extracted_text)
