#!/usr/bin/env python3
"""
Local Runner: ProcessReceipt Lambda

Builds an S3 ObjectCreated notification for a receipt image and runs it
through the ProcessReceipt handler.

Usage:
    # Dry run - show the event and the resolved settings
    python scripts/run_local.py --bucket receipts --key alice-pix.jpg --dry-run

    # Run against real AWS (requires credentials, MODEL_ID and
    # CREATE_TRANSACTION_ENDPOINT)
    python scripts/run_local.py --bucket receipts --key alice-pix.jpg --aws

    # Run with fixture OCR output and model reply instead of AWS
    python scripts/run_local.py --key alice-pix.jpg \\
        --ocr-fixture detect_text.json --reply-fixture reply.json
"""

import argparse
import io
import json
import sys
from pathlib import Path
from typing import Any

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import structlog  # noqa: E402

from lambdas.process_receipt.handler import lambda_handler  # noqa: E402
from lambdas.process_receipt.pipeline import ReceiptPipeline  # noqa: E402
from payments.shared.config import get_settings  # noqa: E402
from payments.shared.llm.bedrock_client import BedrockLLMClient  # noqa: E402
from payments.shared.models.events import S3EventNotification  # noqa: E402
from payments.shared.tools.transactions import create_http_client  # noqa: E402

log = structlog.get_logger()


class FixtureRekognitionClient:
    """Returns a DetectText response loaded from a JSON file."""

    def __init__(self, path: Path):
        self._response = json.loads(path.read_text(encoding="utf-8"))

    def detect_text(self, **kwargs: Any) -> dict[str, Any]:
        log.info("fixture_detect_text", image=kwargs.get("Image"))
        return self._response


class FixtureBedrockRuntimeClient:
    """Wraps a fixture model reply in a chat-completion envelope."""

    def __init__(self, path: Path):
        self._content = path.read_text(encoding="utf-8")

    def invoke_model(self, **kwargs: Any) -> dict[str, Any]:
        log.info("fixture_invoke_model", model_id=kwargs.get("modelId"))
        body = json.dumps({"choices": [{"message": {"content": self._content}}]})
        return {"body": io.BytesIO(body.encode("utf-8"))}


def build_event(bucket: str, key: str) -> dict[str, Any]:
    return {
        "Records": [
            {
                "eventSource": "aws:s3",
                "eventName": "ObjectCreated:Put",
                "s3": {
                    "bucket": {"name": bucket},
                    "object": {"key": key},
                },
            }
        ]
    }


def run_with_fixtures(event: dict[str, Any], ocr_fixture: Path, reply_fixture: Path) -> list[dict]:
    settings = get_settings()
    pipeline = ReceiptPipeline(
        settings=settings,
        rekognition_client=FixtureRekognitionClient(ocr_fixture),
        llm_client=BedrockLLMClient(FixtureBedrockRuntimeClient(reply_fixture), settings),
        http_client=create_http_client(settings),
    )
    outcomes = pipeline.run(S3EventNotification.model_validate(event))
    return [outcome.to_dict() for outcome in outcomes]


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run the ProcessReceipt Lambda locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --key alice-pix.jpg --dry-run
  %(prog)s --bucket receipts --key alice-pix.jpg --aws
  %(prog)s --key alice-pix.jpg --ocr-fixture ocr.json --reply-fixture reply.json
        """,
    )
    parser.add_argument("--bucket", default="receipts", help="S3 bucket name")
    parser.add_argument("--key", required=True, help="S3 object key (<user>-<name>)")

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the event and settings without executing",
    )
    mode_group.add_argument(
        "--aws",
        action="store_true",
        help="Run the handler against real AWS resources",
    )

    parser.add_argument("--ocr-fixture", type=Path, help="DetectText response JSON file")
    parser.add_argument("--reply-fixture", type=Path, help="Model reply content file")

    args = parser.parse_args()
    event = build_event(args.bucket, args.key)

    if args.aws:
        print(json.dumps(lambda_handler(event, None), indent=2))
        return

    if args.ocr_fixture and args.reply_fixture and not args.dry_run:
        print(json.dumps(run_with_fixtures(event, args.ocr_fixture, args.reply_fixture), indent=2))
        return

    print(json.dumps(event, indent=2))
    print(get_settings().model_dump_json(indent=2))


if __name__ == "__main__":
    main()
