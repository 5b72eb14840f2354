"""
Stripe webhook verification.

The ``Stripe-Signature`` header is checked by ``stripe.WebhookSignature``
against the endpoint secret, the same verifier ``stripe.Webhook`` uses.
Verification fails closed: no header or no secret is an invalid signature.
Events come back as plain dicts for the gateway.
"""

import json
from typing import Optional

import stripe

from decisionhub.errors import SignatureInvalid

DEFAULT_TOLERANCE_SECONDS = stripe.Webhook.DEFAULT_TOLERANCE


def construct_event(
    payload: bytes,
    header: Optional[str],
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
) -> dict:
    """Verify the signature, then decode the event body."""
    if not header:
        raise SignatureInvalid("No signature")
    if not secret:
        raise SignatureInvalid("Webhook secret not configured")

    try:
        body = payload.decode("utf-8")
        stripe.WebhookSignature.verify_header(body, header, secret, tolerance)
        event = json.loads(body)
    except stripe.SignatureVerificationError as exc:
        raise SignatureInvalid(exc.user_message or SignatureInvalid.default_message) from exc
    except ValueError as exc:
        raise SignatureInvalid("Invalid webhook payload") from exc

    if not isinstance(event, dict):
        raise SignatureInvalid("Invalid webhook payload")
    return event
