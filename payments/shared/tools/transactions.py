"""
Transaction Endpoint Tools

Enrichment of extracted payment fields and delivery of the resulting
record to the downstream transaction endpoint.
"""

import httpx
import structlog

from payments.shared.config import Settings
from payments.shared.exceptions import TransactionDispatchError
from payments.shared.models.payment import PaymentInfo
from payments.shared.models.results import FailureKind, StageResult

log = structlog.get_logger()


def create_http_client(settings: Settings) -> httpx.Client:
    """Create the HTTP client used for the transaction endpoint."""
    return httpx.Client(timeout=settings.dispatch_timeout_seconds)


def derive_user(object_key: str) -> str:
    """
    Derive the user identifier from an object key.

    Keys follow the ``<user>-<rest>`` naming convention; a key without a
    hyphen yields the whole key.
    """
    return object_key.split("-", 1)[0]


def _response_data(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return response.text


def send_payment_info(
    http_client: httpx.Client,
    endpoint: str,
    payment_info: PaymentInfo,
) -> StageResult[dict]:
    """
    POST payment info to the transaction endpoint.

    Any 2xx status counts as delivered. A non-2xx status or a network
    error is logged and returned as a dispatch_error failure.

    Args:
        http_client: httpx client
        endpoint: Transaction endpoint URL
        payment_info: Enriched payment record

    Returns:
        StageResult holding the endpoint response, or a dispatch_error failure
    """
    payload = payment_info.model_dump()

    log.info("sending_payment_info", endpoint=endpoint, payment_info=payload)

    try:
        response = http_client.post(
            endpoint,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        if not response.is_success:
            raise TransactionDispatchError(
                endpoint=endpoint,
                status_code=response.status_code,
                reason=response.reason_phrase,
                response_body=response.text,
            )
    except TransactionDispatchError as e:
        log.error(
            "payment_dispatch_failed",
            endpoint=endpoint,
            status_code=e.status_code,
            response_body=e.response_body,
            error=str(e),
        )
        return StageResult.failed(FailureKind.DISPATCH_ERROR, e)
    except httpx.HTTPError as e:
        log.error(
            "payment_dispatch_failed",
            endpoint=endpoint,
            error=str(e),
            error_type=type(e).__name__,
        )
        return StageResult.failed(
            FailureKind.DISPATCH_ERROR,
            TransactionDispatchError(endpoint=endpoint, reason=str(e)),
        )

    response_data = _response_data(response)
    log.info(
        "payment_info_sent",
        endpoint=endpoint,
        status_code=response.status_code,
        response=response_data,
    )
    return StageResult.success({"status_code": response.status_code, "response": response_data})
