"""
Payment Models

Structured payment fields extracted from a receipt, and the enriched
record sent to the transaction endpoint.
"""

from pydantic import BaseModel, ConfigDict, Field


class PaymentExtraction(BaseModel):
    """
    Payment fields returned by the language model.

    Values are kept exactly as the model produced them. A numeric string
    amount is rejected rather than converted.
    """

    model_config = ConfigDict(extra="ignore")

    amount: float = Field(
        ...,
        strict=True,
        description="Amount paid, discount applied if mentioned",
    )
    payment_date: str = Field(..., description="Payment date as YYYY-MM-DD")
    institution: str = Field(..., description="Name of the entity receiving the payment")


class PaymentInfo(PaymentExtraction):
    """Payment fields enriched with the user derived from the object key."""

    user: str = Field(..., description="User identifier prefix of the S3 object key")

    @classmethod
    def from_extraction(cls, extraction: PaymentExtraction, user: str) -> "PaymentInfo":
        return cls(**extraction.model_dump(), user=user)
