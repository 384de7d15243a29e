import hashlib
import hmac
import json
import time

import pytest

from .conftest import WEBHOOK_SECRET


WEBHOOK_URL = "/api/v1/webhooks/stripe"


def sign(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.{payload}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def stripe_event(event_type: str, obj: dict, event_id: str = "evt_test_1") -> str:
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": obj},
    })


def post_event(client, payload: str, signature: str = None):
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers["Stripe-Signature"] = signature
    return client.post(WEBHOOK_URL, content=payload, headers=headers)


@pytest.fixture
def placed_order(client, customer_headers):
    response = client.post("/api/v1/orders/", json={
        "customer_email": "buyer@example.com",
        "items": [{
            "product_id": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
            "variant_id": "9c1b6f0e-2d2e-4c52-9f0f-6a3c0b9a1d11",
            "product_name": "Heat Pump 9kW",
            "variant_name": "Outdoor unit",
            "sku": "HP-9KW-OUT",
            "quantity": 1,
            "unit_price": "1899.00",
        }],
        "payment_intent_id": "pi_api_1",
        "payment_method": "card",
    }, headers=customer_headers)
    assert response.status_code == 201
    return response.json()


def get_admin_order(client, admin_headers, order):
    response = client.get(f"/api/v1/admin/orders/{order['id']}", headers=admin_headers)
    assert response.status_code == 200
    return response.json()


def test_payment_succeeded_marks_order_paid(client, placed_order, admin_headers):
    payload = stripe_event("payment_intent.succeeded", {"id": "pi_api_1", "object": "payment_intent"})

    response = post_event(client, payload, sign(payload))

    assert response.status_code == 200
    assert response.json() == {"received": True}
    order = get_admin_order(client, admin_headers, placed_order)
    assert order["status"] == "paid"
    assert order["paid_at"] is not None


def test_duplicate_delivery_is_acknowledged_once(client, placed_order, admin_headers):
    payload = stripe_event("payment_intent.succeeded", {"id": "pi_api_1", "object": "payment_intent"})

    first = post_event(client, payload, sign(payload))
    after_first = get_admin_order(client, admin_headers, placed_order)
    second = post_event(client, payload, sign(payload))
    after_second = get_admin_order(client, admin_headers, placed_order)

    assert first.status_code == second.status_code == 200
    assert after_second["paid_at"] == after_first["paid_at"]
    assert after_second["notes"] == after_first["notes"]


def test_payment_failed_records_gateway_message(client, placed_order, admin_headers):
    payload = stripe_event("payment_intent.payment_failed", {
        "id": "pi_api_1",
        "object": "payment_intent",
        "last_payment_error": {"message": "Insufficient funds"},
    })

    assert post_event(client, payload, sign(payload)).status_code == 200

    order = get_admin_order(client, admin_headers, placed_order)
    assert order["status"] == "payment_failed"
    assert order["notes"].endswith("Payment failed: Insufficient funds")


def test_charge_refunded_after_payment(client, placed_order, admin_headers):
    paid = stripe_event("payment_intent.succeeded", {"id": "pi_api_1"}, event_id="evt_1")
    refunded = stripe_event("charge.refunded", {
        "id": "ch_api_1",
        "object": "charge",
        "payment_intent": "pi_api_1",
        "amount_refunded": 189900,
    }, event_id="evt_2")

    post_event(client, paid, sign(paid))
    response = post_event(client, refunded, sign(refunded))

    assert response.status_code == 200
    order = get_admin_order(client, admin_headers, placed_order)
    assert order["status"] == "refunded"
    assert "Refunded 1899.00 USD via Stripe" in order["notes"]


def test_unknown_payment_intent_is_acknowledged(client):
    payload = stripe_event("payment_intent.succeeded", {"id": "pi_nobody"})

    response = post_event(client, payload, sign(payload))

    assert response.status_code == 200
    assert response.json() == {"received": True}


def test_unhandled_event_type_is_acknowledged(client, placed_order, admin_headers):
    payload = stripe_event("customer.created", {"id": "cus_1", "object": "customer"})

    assert post_event(client, payload, sign(payload)).status_code == 200
    assert get_admin_order(client, admin_headers, placed_order)["status"] == "pending"


def test_missing_signature_is_rejected(client, placed_order, admin_headers):
    payload = stripe_event("payment_intent.succeeded", {"id": "pi_api_1"})

    response = post_event(client, payload)

    assert response.status_code == 400
    assert get_admin_order(client, admin_headers, placed_order)["status"] == "pending"


def test_wrong_secret_is_rejected(client, placed_order, admin_headers):
    payload = stripe_event("payment_intent.succeeded", {"id": "pi_api_1"})

    response = post_event(client, payload, sign(payload, secret="whsec_other"))

    assert response.status_code == 400
    assert get_admin_order(client, admin_headers, placed_order)["status"] == "pending"


def test_tampered_payload_is_rejected(client, placed_order, admin_headers):
    original = stripe_event("payment_intent.payment_failed", {"id": "pi_api_1"})
    tampered = stripe_event("payment_intent.succeeded", {"id": "pi_api_1"})

    response = post_event(client, tampered, sign(original))

    assert response.status_code == 400
    assert get_admin_order(client, admin_headers, placed_order)["status"] == "pending"


def test_stale_timestamp_is_rejected(client):
    payload = stripe_event("payment_intent.succeeded", {"id": "pi_api_1"})

    response = post_event(client, payload, sign(payload, timestamp=int(time.time()) - 3600))

    assert response.status_code == 400


def test_non_utf8_body_is_rejected(client):
    response = client.post(
        WEBHOOK_URL,
        content=b"\xff\xfe\x00not-json",
        headers={"Content-Type": "application/json", "Stripe-Signature": "t=1,v1=deadbeef"},
    )

    assert response.status_code == 400
