"""
Payment endpoints.

Purchase flow for a book:
1. ``POST /payment/create-order`` returns a gateway order for checkout
2. The client completes checkout and receives a signed callback
3. ``POST /payment/verify`` checks the signature and grants access
4. ``GET /payment/status/{document_id}`` reports whether access was granted
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from app.core.logging import get_api_logger
from app.core.security import get_current_user
from app.models.schemas import (
    AckResponse,
    CreateOrderRequest,
    OrderResponse,
    PaymentStatusResponse,
    VerifyPaymentRequest,
    DOCUMENT_ERROR_RESPONSES,
)
from app.services.payment_service import PaymentService

logger = get_api_logger()

router = APIRouter(prefix="/payment")


def get_payment_service(request: Request) -> PaymentService:
    return request.app.state.services.payment_service


@router.post(
    "/create-order",
    response_model=OrderResponse,
    summary="Create Payment Order",
    operation_id="createOrder",
    description="""Create a gateway order for buying a book.

**Error Responses:**
- **400 Bad Request**: Book already purchased
- **404 Not Found**: Book not found
- **500 Internal Server Error**: Gateway not configured or order rejected""",
    responses=DOCUMENT_ERROR_RESPONSES,
)
async def create_order(
    body: CreateOrderRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service),
):
    order = await payment_service.create_order(body.book_id, current_user["user_id"])
    return OrderResponse(order=order)


@router.post(
    "/verify",
    response_model=AckResponse,
    summary="Verify Payment",
    operation_id="verifyPayment",
    description="""Verify the checkout signature and grant access to the book.

The signature is HMAC-SHA256 over ``"<order_id>|<payment_id>"`` keyed by the
gateway secret.""",
    responses=DOCUMENT_ERROR_RESPONSES,
)
async def verify_payment(
    body: VerifyPaymentRequest,
    current_user: Dict[str, Any] = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service),
):
    await payment_service.verify_payment(
        order_id=body.razorpay_order_id,
        payment_id=body.razorpay_payment_id,
        signature=body.razorpay_signature,
        document_id=body.book_id,
        user_id=current_user["user_id"],
    )
    return AckResponse(message="Payment verified successfully")


@router.get(
    "/status/{document_id}",
    response_model=PaymentStatusResponse,
    response_model_by_alias=True,
    summary="Payment Status",
    operation_id="paymentStatus",
    responses=DOCUMENT_ERROR_RESPONSES,
)
async def payment_status(
    document_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user),
    payment_service: PaymentService = Depends(get_payment_service),
):
    """Whether the caller has paid for the book."""
    has_paid = await payment_service.check_status(document_id, current_user["user_id"])
    return PaymentStatusResponse(has_paid=has_paid)
