"""
Unit tests for the ProcessReceipt Lambda handler.
"""

import json
from unittest.mock import patch

import httpx
import pytest
from moto import mock_aws
from pydantic import ValidationError

from lambdas.process_receipt.handler import build_pipeline, get_pipeline, lambda_handler
from payments.shared.exceptions import ConfigurationError, PipelineAbortedError
from tests.mocks.mock_bedrock import MockBedrockRuntimeClient


class TestPipelineConstruction:
    """Tests for building the pipeline from settings."""

    def test_build_pipeline_creates_clients(self, settings):
        with mock_aws():
            pipeline = build_pipeline(settings)

        assert pipeline.settings is settings
        assert pipeline.rekognition_client.meta.service_model.service_name == "rekognition"
        assert pipeline.rekognition_client.meta.region_name == "us-east-1"
        assert isinstance(pipeline.http_client, httpx.Client)
        assert pipeline.llm_client.model_id == "us.deepseek.r1-v1:0"

    def test_endpoint_url_passed_to_client(self, settings):
        local = settings.model_copy(update={"rekognition_endpoint_url": "http://localhost:4566"})

        with mock_aws():
            pipeline = build_pipeline(local)

        assert pipeline.rekognition_client.meta.endpoint_url == "http://localhost:4566"

    def test_pipeline_cached_per_container(self):
        with mock_aws():
            assert get_pipeline() is get_pipeline()


class TestLambdaHandler:
    """Tests for lambda_handler."""

    def test_success_summary(self, pipeline, s3_event):
        with patch("lambdas.process_receipt.handler.get_pipeline", return_value=pipeline):
            response = lambda_handler(s3_event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "success"
        assert body["records"][0]["status"] == "dispatched"
        assert body["records"][0]["user"] == "bob"

    def test_missing_configuration_fails_before_remote_calls(
        self, monkeypatch, s3_event, rekognition_client
    ):
        monkeypatch.delenv("MODEL_ID")

        with patch(
            "lambdas.process_receipt.handler.build_pipeline"
        ) as build, pytest.raises(ConfigurationError) as exc_info:
            lambda_handler(s3_event, None)

        assert "model_id" in exc_info.value.fields
        build.assert_not_called()
        rekognition_client.detect_text.assert_not_called()

    def test_invalid_event_raises(self, pipeline):
        with patch("lambdas.process_receipt.handler.get_pipeline", return_value=pipeline):
            with pytest.raises(ValidationError):
                lambda_handler({"Records": []}, None)

    def test_fatal_failure_raises_after_all_records(
        self, pipeline, event_generator, bedrock_runtime, transaction_endpoint
    ):
        bedrock_runtime.set_error(MockBedrockRuntimeClient.throttling_error())
        event = event_generator.s3_event(("b", "ana-1.jpg"), ("b", "bia-2.jpg"))

        with patch("lambdas.process_receipt.handler.get_pipeline", return_value=pipeline):
            with pytest.raises(PipelineAbortedError) as exc_info:
                lambda_handler(event, None)

        assert exc_info.value.failed_keys == ["ana-1.jpg"]
        assert [body["user"] for body in transaction_endpoint.bodies] == ["bia"]

    def test_dispatch_failure_does_not_raise(self, pipeline, s3_event, transaction_endpoint):
        transaction_endpoint.status_code = 503
        transaction_endpoint.response_body = "maintenance"

        with patch("lambdas.process_receipt.handler.get_pipeline", return_value=pipeline):
            response = lambda_handler(s3_event, None)

        body = json.loads(response["body"])
        assert response["statusCode"] == 200
        assert body["records"][0]["status"] == "failed"
        assert body["records"][0]["failure"] == "dispatch_error"
