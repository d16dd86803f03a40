"""
Integration tests for payment endpoints.

Tests /payment/create-order, /payment/verify and /payment/status/{id}.
"""

import os

import pytest

# Set test environment
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-purposes-only-32chars")
os.environ.setdefault("ENVIRONMENT", "test")


async def _create_book(async_client, headers, upload_form):
    data, files = upload_form()
    response = await async_client.post(
        "/upload-files", data=data, files=files, headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()["data"]["id"]


class TestCreateOrderEndpoint:
    """Tests for POST /payment/create-order."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_order(
        self, async_client, auth_headers, other_auth_headers, upload_form
    ):
        book_id = await _create_book(async_client, auth_headers, upload_form)

        response = await async_client.post(
            "/payment/create-order", json={"bookId": book_id}, headers=other_auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["order"]["id"].startswith("order_")
        assert body["order"]["amount"] == 900

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_order_unknown_book(self, async_client, auth_headers):
        response = await async_client.post(
            "/payment/create-order", json={"bookId": "missing"}, headers=auth_headers
        )

        assert response.status_code == 404

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_order_missing_book_id(self, async_client, auth_headers):
        response = await async_client.post(
            "/payment/create-order", json={}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Missing required fields: bookId"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_gateway_not_configured(
        self, async_client, auth_headers, upload_form, services
    ):
        book_id = await _create_book(async_client, auth_headers, upload_form)
        services.payment_gateway._key_id = None

        response = await async_client.post(
            "/payment/create-order", json={"bookId": book_id}, headers=auth_headers
        )

        assert response.status_code == 500
        assert response.json()["code"] == "CONFIGURATION_ERROR"


class TestPurchaseFlow:
    """End-to-end purchase through the API."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_order_verify_status(
        self, async_client, auth_headers, other_auth_headers, upload_form, sign,
        other_user_id,
    ):
        book_id = await _create_book(async_client, auth_headers, upload_form)

        status_before = await async_client.get(
            f"/payment/status/{book_id}", headers=other_auth_headers
        )
        assert status_before.json() == {"status": "ok", "hasPaid": False}

        order = (
            await async_client.post(
                "/payment/create-order", json={"bookId": book_id}, headers=other_auth_headers
            )
        ).json()["order"]

        verify = await async_client.post(
            "/payment/verify",
            json={
                "razorpay_order_id": order["id"],
                "razorpay_payment_id": "pay_29QQoUBi66xm2f",
                "razorpay_signature": sign(order["id"], "pay_29QQoUBi66xm2f"),
                "bookId": book_id,
            },
            headers=other_auth_headers,
        )
        assert verify.status_code == 200
        assert verify.json()["message"] == "Payment verified successfully"

        status_after = await async_client.get(
            f"/payment/status/{book_id}", headers=other_auth_headers
        )
        assert status_after.json()["hasPaid"] is True

        purchased = await async_client.get("/purchased-books", headers=other_auth_headers)
        assert [d["id"] for d in purchased.json()["data"]] == [book_id]

        detail = await async_client.get(f"/files/{book_id}", headers=other_auth_headers)
        assert detail.json()["data"]["paidUsers"] == [other_user_id]

        again = await async_client.post(
            "/payment/create-order", json={"bookId": book_id}, headers=other_auth_headers
        )
        assert again.status_code == 400
        assert again.json()["code"] == "ALREADY_PAID"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_tampered_signature(
        self, async_client, auth_headers, other_auth_headers, upload_form, sign
    ):
        book_id = await _create_book(async_client, auth_headers, upload_form)

        response = await async_client.post(
            "/payment/verify",
            json={
                "razorpay_order_id": "order_1",
                "razorpay_payment_id": "pay_1",
                "razorpay_signature": sign("order_1", "pay_other"),
                "bookId": book_id,
            },
            headers=other_auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VERIFICATION_FAILED"

        status = await async_client.get(
            f"/payment/status/{book_id}", headers=other_auth_headers
        )
        assert status.json()["hasPaid"] is False

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_non_ascii_signature(
        self, async_client, auth_headers, other_auth_headers, upload_form
    ):
        book_id = await _create_book(async_client, auth_headers, upload_form)

        response = await async_client.post(
            "/payment/verify",
            json={
                "razorpay_order_id": "order_1",
                "razorpay_payment_id": "pay_1",
                "razorpay_signature": "é" * 64,
                "bookId": book_id,
            },
            headers=other_auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "VERIFICATION_FAILED"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_status_unknown_book(self, async_client, auth_headers):
        response = await async_client.get("/payment/status/missing", headers=auth_headers)

        assert response.status_code == 404
