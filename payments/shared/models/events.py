"""
Event Models

Pydantic models for the S3 ObjectCreated notifications that trigger
the receipt pipeline. Only the fields the pipeline reads are modelled;
everything else in the notification is ignored.
"""

from urllib.parse import unquote_plus

from pydantic import BaseModel, ConfigDict, Field


class S3Bucket(BaseModel):
    """Bucket section of an S3 event record."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1, description="Bucket name")


class S3Object(BaseModel):
    """Object section of an S3 event record."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str = Field(..., min_length=1, description="URL-encoded object key")
    size: int | None = Field(default=None, ge=0)

    @property
    def decoded_key(self) -> str:
        """Object key with S3 notification URL-encoding removed."""
        return unquote_plus(self.key)


class S3Entity(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    bucket: S3Bucket
    object: S3Object


class S3EventRecord(BaseModel):
    """A single record of an S3 event notification."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    event_name: str | None = Field(default=None, alias="eventName")
    s3: S3Entity

    @property
    def bucket_name(self) -> str:
        return self.s3.bucket.name

    @property
    def object_key(self) -> str:
        return self.s3.object.decoded_key


class S3EventNotification(BaseModel):
    """
    S3 event notification delivered to the Lambda function.

    Expected shape: {"Records": [{"s3": {"bucket": {"name": ...},
    "object": {"key": ...}}}, ...]}
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    records: list[S3EventRecord] = Field(..., min_length=1, alias="Records")
