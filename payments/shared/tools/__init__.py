"""
Tools for the external services the receipt pipeline talks to.

- rekognition: text detection on S3-hosted images
- transactions: delivery of payment records to the transaction endpoint
"""

from payments.shared.tools.rekognition import (
    build_extracted_text,
    create_rekognition_client,
    detect_text,
)
from payments.shared.tools.transactions import (
    create_http_client,
    derive_user,
    send_payment_info,
)

__all__ = [
    "build_extracted_text",
    "create_rekognition_client",
    "detect_text",
    "create_http_client",
    "derive_user",
    "send_payment_info",
]
