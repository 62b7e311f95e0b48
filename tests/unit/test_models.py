"""
Unit tests for event, payment and result models.
"""

import pytest
from pydantic import ValidationError

from payments.shared.models.events import S3EventNotification
from payments.shared.models.payment import PaymentExtraction, PaymentInfo
from payments.shared.models.results import (
    FailureKind,
    RecordOutcome,
    RecordStatus,
    StageResult,
)


class TestS3EventNotification:
    """Tests for S3 notification parsing."""

    def test_parse_single_record(self, s3_event):
        notification = S3EventNotification.model_validate(s3_event)

        assert len(notification.records) == 1
        record = notification.records[0]
        assert record.bucket_name == "b"
        assert record.object_key == "bob-img.jpg"
        assert record.event_name == "ObjectCreated:Put"

    def test_parse_multiple_records_in_order(self, event_generator):
        event = event_generator.s3_event(("b", "ana-1.jpg"), ("b", "bia-2.jpg"))

        notification = S3EventNotification.model_validate(event)

        assert [r.object_key for r in notification.records] == ["ana-1.jpg", "bia-2.jpg"]

    def test_minimal_record(self):
        event = {"Records": [{"s3": {"bucket": {"name": "b"}, "object": {"key": "k"}}}]}

        notification = S3EventNotification.model_validate(event)

        assert notification.records[0].object_key == "k"

    def test_url_encoded_key_is_decoded(self, event_generator):
        event = event_generator.s3_event(("b", "maria-recibo+de+luz%281%29.jpg"))

        record = S3EventNotification.model_validate(event).records[0]

        assert record.object_key == "maria-recibo de luz(1).jpg"
        assert record.s3.object.key == "maria-recibo+de+luz%281%29.jpg"

    def test_empty_records_rejected(self):
        with pytest.raises(ValidationError):
            S3EventNotification.model_validate({"Records": []})

    def test_missing_records_rejected(self):
        with pytest.raises(ValidationError):
            S3EventNotification.model_validate({"detail-type": "Scheduled Event"})

    def test_missing_key_rejected(self):
        with pytest.raises(ValidationError):
            S3EventNotification.model_validate(
                {"Records": [{"s3": {"bucket": {"name": "b"}, "object": {}}}]}
            )


class TestPaymentInfo:
    """Tests for payment models."""

    def test_from_extraction_adds_user(self):
        extraction = PaymentExtraction(amount=50.0, payment_date="2024-03-01", institution="ACME")

        info = PaymentInfo.from_extraction(extraction, user="bob")

        assert info.model_dump() == {
            "amount": 50.0,
            "payment_date": "2024-03-01",
            "institution": "ACME",
            "user": "bob",
        }

    def test_integer_amount_coerced_to_float(self):
        extraction = PaymentExtraction(amount=50, payment_date="2024-03-01", institution="ACME")

        assert isinstance(extraction.amount, float)

    def test_string_amount_rejected(self):
        with pytest.raises(ValidationError):
            PaymentExtraction(amount="50.00", payment_date="2024-03-01", institution="ACME")

    def test_extra_fields_ignored(self):
        extraction = PaymentExtraction.model_validate({
            "amount": 1.5,
            "payment_date": "2024-01-01",
            "institution": "X",
            "currency": "BRL",
        })

        assert "currency" not in extraction.model_dump()


class TestStageResult:
    """Tests for StageResult."""

    def test_success(self):
        result = StageResult.success("text")

        assert result.ok
        assert result.value == "text"
        assert result.failure is None

    def test_failed(self):
        error = RuntimeError("boom")

        result = StageResult.failed(FailureKind.OCR_ERROR, error)

        assert not result.ok
        assert result.value is None
        assert result.error is error
        assert result.error_message == "boom"

    def test_record_outcome_to_dict(self):
        outcome = RecordOutcome(
            bucket="b",
            key="k",
            status=RecordStatus.SKIPPED,
            failure=FailureKind.LLM_PARSE_ERROR,
        )

        assert outcome.to_dict()["status"] == "skipped"
        assert outcome.to_dict()["failure"] == "llm_parse_error"
        assert outcome.to_dict()["fatal"] is False
