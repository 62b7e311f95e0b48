"""
ProcessReceipt Lambda

Triggered by S3 ObjectCreated events for uploaded receipt images.
Extracts payment info and forwards it to the transaction endpoint.

Trigger: S3 ObjectCreated notification
Output: HTTP POST to CREATE_TRANSACTION_ENDPOINT

Flow:
1. Detect text in the image (Rekognition)
2. Extract payment fields from the text (Bedrock)
3. Derive the user from the object key
4. POST the payment record
"""

from lambdas.process_receipt.handler import build_pipeline, get_pipeline, lambda_handler
from lambdas.process_receipt.pipeline import ReceiptPipeline

__all__ = [
    "lambda_handler",
    "build_pipeline",
    "get_pipeline",
    "ReceiptPipeline",
]
