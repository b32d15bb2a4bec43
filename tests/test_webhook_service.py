from __future__ import annotations

import json
import time
from unittest.mock import Mock

import pytest

from api.core.errors import SignatureError, ValidationError
from api.services.webhook_service import (
    CHECKOUT_COMPLETED,
    WebhookDispatcher,
    WebhookEvent,
    WebhookVerifier,
    customer_email,
)

from conftest import sign_payload


def _checkout_event(email="x@y.com") -> bytes:
    return json.dumps(
        {
            "id": "evt_1",
            "type": CHECKOUT_COMPLETED,
            "data": {"object": {"customer_details": {"email": email}}},
        }
    ).encode()


def test_verify_accepts_valid_signature(db_env):
    payload = _checkout_event()
    event = WebhookVerifier().verify(payload, sign_payload(payload))
    assert event.type == CHECKOUT_COMPLETED
    assert event.id == "evt_1"
    assert customer_email(event) == "x@y.com"


def test_verify_rejects_tampered_body(db_env):
    payload = _checkout_event()
    header = sign_payload(payload)
    tampered = payload.replace(b"x@y.com", b"z@y.com")
    with pytest.raises(SignatureError):
        WebhookVerifier().verify(tampered, header)


def test_verify_rejects_reformatted_json(db_env):
    payload = _checkout_event()
    header = sign_payload(payload)
    reencoded = json.dumps(json.loads(payload), indent=2).encode()
    with pytest.raises(SignatureError):
        WebhookVerifier().verify(reencoded, header)


@pytest.mark.parametrize("header", [None, "", "garbage", "t=1,v1=deadbeef"])
def test_verify_rejects_bad_headers(db_env, header):
    with pytest.raises(SignatureError):
        WebhookVerifier().verify(_checkout_event(), header)


def test_verify_rejects_wrong_secret_and_stale_timestamp(db_env):
    payload = _checkout_event()
    with pytest.raises(SignatureError):
        WebhookVerifier().verify(payload, sign_payload(payload, secret="whsec_other"))
    with pytest.raises(SignatureError):
        WebhookVerifier().verify(payload, sign_payload(payload, timestamp=int(time.time()) - 3600))


def test_verify_rejects_unparseable_payload(db_env):
    payload = b"not json"
    with pytest.raises(ValidationError):
        WebhookVerifier().verify(payload, sign_payload(payload))


def test_customer_email_falls_back_to_customer_email_field():
    event = WebhookEvent(id="evt", type=CHECKOUT_COMPLETED, data={"object": {"customer_email": "a@b.com"}})
    assert customer_email(event) == "a@b.com"
    assert customer_email(WebhookEvent(id="evt", type=CHECKOUT_COMPLETED, data={})) is None


def test_dispatch_schedules_activation_for_checkout():
    activation = Mock()
    schedule = Mock()
    dispatcher = WebhookDispatcher(activation=activation)
    event = WebhookEvent(
        id="evt",
        type=CHECKOUT_COMPLETED,
        data={"object": {"customer_details": {"email": "x@y.com"}}},
    )

    assert dispatcher.dispatch(event, schedule) is True
    schedule.assert_called_once_with(activation.run_activation, "x@y.com")


def test_dispatch_ignores_other_events():
    schedule = Mock()
    dispatcher = WebhookDispatcher(activation=Mock())
    assert dispatcher.dispatch(WebhookEvent(id="evt", type="invoice.paid", data={}), schedule) is False
    schedule.assert_not_called()
