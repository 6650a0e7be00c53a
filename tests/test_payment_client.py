"""Tests for the payment provider HTTP client."""

from decimal import Decimal

import httpx
import pytest

from app.exceptions import ExternalServiceError
from app.services.payment_client import PaymentProviderClient


@pytest.fixture
def provider():
    return PaymentProviderClient(base_url="https://provider.test/v1/", api_key="key-123", timeout=1.0)


@pytest.mark.asyncio
async def test_create_link_payload_and_response(provider):
    sent = {}

    async def fake_post(payload):
        sent.update(payload)
        return httpx.Response(200, json={"id": "lnk_1", "url": "https://pay.test/lnk_1"})

    provider._post_link = fake_post

    link = await provider.create_link(
        42, Decimal("357.50"), [{"name": "Treats", "amount": "357.50", "quantity": 1}]
    )

    assert link == {"payment_id": "lnk_1", "payment_url": "https://pay.test/lnk_1"}
    assert sent["amount"] == "357.50"
    assert sent["currency"] == "AED"
    assert "orderId=42" in sent["success_url"]
    assert "orderId=42" in sent["failure_url"]


@pytest.mark.asyncio
async def test_create_link_accepts_alternate_field_names(provider):
    async def fake_post(payload):
        return httpx.Response(201, json={"link_id": "lnk_2", "checkout_url": "https://pay.test/c/2"})

    provider._post_link = fake_post

    link = await provider.create_link(1, Decimal("10"), [])

    assert link == {"payment_id": "lnk_2", "payment_url": "https://pay.test/c/2"}


@pytest.mark.asyncio
async def test_create_link_error_status(provider):
    async def fake_post(payload):
        return httpx.Response(422, json={"detail": "bad amount"})

    provider._post_link = fake_post

    with pytest.raises(ExternalServiceError, match="422"):
        await provider.create_link(1, Decimal("10"), [])


@pytest.mark.asyncio
async def test_create_link_network_failure(provider):
    async def fake_post(payload):
        raise httpx.ReadTimeout("timed out")

    provider._post_link = fake_post

    with pytest.raises(ExternalServiceError, match="unavailable"):
        await provider.create_link(1, Decimal("10"), [])


@pytest.mark.asyncio
async def test_get_link_status(provider):
    async def fake_get(payment_id):
        assert payment_id == "lnk_1"
        return httpx.Response(200, json={"id": "lnk_1", "status": "paid"})

    provider._get_link = fake_get

    assert await provider.get_link_status("lnk_1") == "paid"


def test_headers_carry_api_key(provider):
    assert provider.headers["X-API-KEY"] == "key-123"
    assert provider.base_url == "https://provider.test/v1"
