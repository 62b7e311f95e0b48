"""
Payment Extraction

Turns receipt OCR text into structured payment fields using the
Bedrock model.
"""

import json
from datetime import date

import structlog
from pydantic import ValidationError

from payments.shared.exceptions import LLMInvocationError, LLMParsingError
from payments.shared.llm.bedrock_client import BedrockLLMClient
from payments.shared.llm.prompts import build_payment_extraction_prompt
from payments.shared.models.payment import PaymentExtraction
from payments.shared.models.results import FailureKind, StageResult

log = structlog.get_logger()


def _strip_code_fences(content: str) -> str:
    cleaned = content.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_payment_content(content: str) -> PaymentExtraction:
    """
    Parse the model's message text into payment fields.

    Raises:
        LLMParsingError: If the text is not JSON or lacks a required field
    """
    cleaned = _strip_code_fences(content)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise LLMParsingError(
            f"Failed to parse model reply as JSON: {e}",
            raw_output=content,
        ) from e

    try:
        return PaymentExtraction.model_validate(data)
    except ValidationError as e:
        raise LLMParsingError(
            f"Model reply does not match PaymentExtraction: {e}",
            raw_output=content,
        ) from e


def extract_payment_info(
    llm_client: BedrockLLMClient,
    text: str,
    *,
    today: date | None = None,
) -> StageResult[PaymentExtraction]:
    """
    Extract amount, payment date and institution from receipt text.

    Args:
        llm_client: Bedrock client wrapper
        text: OCR text of the receipt
        today: Date used to backfill partial payment dates

    Returns:
        StageResult holding the payment fields, an llm_error failure when
        the model could not be invoked, or an llm_parse_error failure when
        its reply was unusable
    """
    prompt = build_payment_extraction_prompt(text, today=today)

    try:
        content = llm_client.invoke_chat(prompt)
        extraction = parse_payment_content(content)
    except LLMInvocationError as e:
        log.error("payment_extraction_invoke_failed", error=str(e))
        return StageResult.failed(FailureKind.LLM_ERROR, e)
    except LLMParsingError as e:
        log.error(
            "payment_extraction_parse_failed",
            error=str(e),
            raw_output=e.raw_output,
        )
        return StageResult.failed(FailureKind.LLM_PARSE_ERROR, e)

    log.info("payment_info_extracted", **extraction.model_dump())
    return StageResult.success(extraction)
