"""Payment request/response schemas.

Request field names match the Razorpay checkout callback, so clients can
forward it unchanged.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.identifiers import EntityId


def _require_text(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Field cannot be empty")
    return v


class CreateOrderRequest(BaseModel):
    """Request model for creating a payment order."""

    book_id: EntityId = Field(..., alias="bookId", description="Document to purchase")

    model_config = ConfigDict(populate_by_name=True)


class VerifyPaymentRequest(BaseModel):
    """Request model for verifying a completed payment."""

    razorpay_order_id: str = Field(..., description="Gateway order id")
    razorpay_payment_id: str = Field(..., description="Gateway payment id")
    razorpay_signature: str = Field(..., description="Hex HMAC-SHA256 signature")
    book_id: EntityId = Field(..., alias="bookId", description="Purchased document")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("razorpay_order_id", "razorpay_payment_id", "razorpay_signature")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        return _require_text(v)


class OrderResponse(BaseModel):
    """Gateway order, returned verbatim."""

    status: str = Field(default="ok")
    order: Dict[str, Any]


class PaymentStatusResponse(BaseModel):
    """Whether the caller has paid for a document."""

    status: str = Field(default="ok")
    has_paid: bool = Field(..., serialization_alias="hasPaid")
