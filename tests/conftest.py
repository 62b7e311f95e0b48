"""
Pytest Configuration and Shared Fixtures

Provides mocked AWS clients, a recording transaction endpoint,
sample events and test utilities.
"""

import json
import os
from datetime import date
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

# Set test environment before importing application modules
os.environ["MODEL_ID"] = "us.deepseek.r1-v1:0"
os.environ["CREATE_TRANSACTION_ENDPOINT"] = "https://api.example.com/transactions"
os.environ["AWS_REGION"] = "us-east-1"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

# Importing the handler configures structlog for every test
from lambdas.process_receipt.handler import get_pipeline  # noqa: E402
from lambdas.process_receipt.pipeline import ReceiptPipeline  # noqa: E402
from payments.shared.config import get_settings, load_settings  # noqa: E402
from payments.shared.llm.bedrock_client import BedrockLLMClient  # noqa: E402
from tests.mocks.mock_bedrock import MockBedrockRuntimeClient  # noqa: E402
from tests.utils.event_generator import MockEventGenerator  # noqa: E402


ENDPOINT_URL = "https://api.example.com/transactions"


# --- Cache Isolation ---


@pytest.fixture(autouse=True)
def clear_cached_settings():
    """Reset cached settings and pipeline between tests."""
    get_settings.cache_clear()
    get_pipeline.cache_clear()
    yield
    get_settings.cache_clear()
    get_pipeline.cache_clear()


# --- Settings Fixtures ---


@pytest.fixture
def settings():
    """Settings with the default failure policy."""
    return load_settings(
        model_id="us.deepseek.r1-v1:0",
        create_transaction_endpoint=ENDPOINT_URL,
    )


@pytest.fixture
def fixed_today() -> date:
    """Fixed date for deterministic prompts."""
    return date(2024, 3, 15)


# --- Event Fixtures ---


@pytest.fixture
def event_generator() -> MockEventGenerator:
    return MockEventGenerator(seed=42)


@pytest.fixture
def s3_event(event_generator) -> dict[str, Any]:
    """Single-record S3 notification for bob's receipt."""
    return event_generator.s3_event(("b", "bob-img.jpg"))


# --- AWS Client Fixtures ---


@pytest.fixture
def rekognition_client(event_generator):
    """Mock Rekognition client returning two fragments."""
    client = MagicMock()
    client.detect_text.return_value = event_generator.detect_text_response(
        ["Total", "50.00"], ids=[1, 2]
    )
    return client


@pytest.fixture
def bedrock_runtime() -> MockBedrockRuntimeClient:
    runtime = MockBedrockRuntimeClient()
    runtime.set_content('{"amount":50.0,"payment_date":"2024-03-01","institution":"ACME"}')
    return runtime


@pytest.fixture
def llm_client(bedrock_runtime, settings) -> BedrockLLMClient:
    return BedrockLLMClient(bedrock_runtime, settings)


# --- Transaction Endpoint Fixtures ---


class RecordingEndpoint:
    """httpx MockTransport handler recording every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 201
        self.response_body: Any = {"id": "txn-001"}
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.response_body, str):
            return httpx.Response(self.status_code, text=self.response_body)
        return httpx.Response(self.status_code, json=self.response_body)

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def transaction_endpoint() -> RecordingEndpoint:
    return RecordingEndpoint()


@pytest.fixture
def http_client(transaction_endpoint):
    with httpx.Client(transport=httpx.MockTransport(transaction_endpoint)) as client:
        yield client


# --- Pipeline Fixtures ---


@pytest.fixture
def make_pipeline(rekognition_client, bedrock_runtime, http_client, fixed_today):
    """Factory building a pipeline with mocked clients and given settings."""

    def _create(settings) -> ReceiptPipeline:
        return ReceiptPipeline(
            settings=settings,
            rekognition_client=rekognition_client,
            llm_client=BedrockLLMClient(bedrock_runtime, settings),
            http_client=http_client,
            today=lambda: fixed_today,
        )

    return _create


@pytest.fixture
def pipeline(make_pipeline, settings) -> ReceiptPipeline:
    return make_pipeline(settings)
