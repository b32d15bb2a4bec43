"""
Stripe webhook verification and dispatch.

The verifier authenticates the raw request body before anything parses it:
re-encoding the JSON would change the bytes the signature was computed on.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import stripe

from api.core.config import get_settings
from api.core.errors import SignatureError, ValidationError
from api.services.activation_service import ActivationService

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"

Scheduler = Callable[..., Any]


@dataclass
class WebhookEvent:
    id: Optional[str]
    type: str
    data: dict


class WebhookVerifier:
    """Checks a `Stripe-Signature` header against the configured shared secret."""

    def verify(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        settings = get_settings()
        secret = settings.stripe_webhook_secret
        if not secret:
            logger.error("STRIPE_WEBHOOK_SECRET is not configured; rejecting webhook")
            raise SignatureError("Webhook signature verification failed")
        if not signature:
            raise SignatureError("Missing Stripe-Signature header")
        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError:
            raise ValidationError("Webhook payload is not valid UTF-8") from None
        try:
            stripe.WebhookSignature.verify_header(
                body,
                signature,
                secret,
                settings.webhook_tolerance_seconds,
            )
        except stripe.SignatureVerificationError as exc:
            logger.warning("Webhook signature verification failed: %s", exc)
            raise SignatureError("Webhook signature verification failed") from exc
        return self._parse(body)

    def _parse(self, body: str) -> WebhookEvent:
        try:
            raw = json.loads(body)
        except ValueError:
            raise ValidationError("Webhook payload is not valid JSON") from None
        if not isinstance(raw, dict) or not isinstance(raw.get("type"), str):
            raise ValidationError("Webhook payload has no event type")
        data = raw.get("data")
        return WebhookEvent(id=raw.get("id"), type=raw["type"], data=data if isinstance(data, dict) else {})


def customer_email(event: WebhookEvent) -> Optional[str]:
    """Pull the paying customer's email out of a checkout session event."""
    obj = event.data.get("object")
    if not isinstance(obj, dict):
        return None
    details = obj.get("customer_details")
    if isinstance(details, dict) and details.get("email"):
        return details["email"]
    return obj.get("customer_email") or None


@dataclass
class WebhookDispatcher:
    """Routes verified events to handlers. Unhandled types are acknowledged and ignored."""

    activation: ActivationService = field(default_factory=ActivationService)

    def dispatch(self, event: WebhookEvent, schedule: Scheduler) -> bool:
        """Return True when work was scheduled for the event.

        `schedule(func, *args)` detaches the work from the response (FastAPI
        BackgroundTasks.add_task in the router).
        """
        if event.type == CHECKOUT_COMPLETED:
            email = customer_email(event)
            logger.info("Checkout completed (event %s) for %s", event.id, email or "<missing email>")
            schedule(self.activation.run_activation, email)
            return True
        logger.debug("Ignoring webhook event %s (%s)", event.id, event.type)
        return False
