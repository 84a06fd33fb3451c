"""Phone push notifications through an HTTP push service."""

import requests

from hazwatch.errors import ConnectionError, DeserializationError

TIMEOUT_SECONDS = 30


def add(left, right):
    """Return the sum of two numbers."""
    return left + right


def build_push_url(acct_key, resturl, message, title, priority):
    """Build the push request URL with its query parameters."""
    return f"{resturl}?accountKey={acct_key}&title={title}&message={message}&priority={priority}"


def push(acct_key, resturl, message, title, priority):
    """Send a push notification and return the service's 'response' field."""
    url = build_push_url(acct_key, resturl, message, title, priority)
    try:
        reply = requests.post(url, timeout=TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise ConnectionError(str(exc)) from exc
    try:
        payload = reply.json()
    except ValueError as exc:
        raise DeserializationError(f"invalid JSON payload: {exc}") from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("response"), str):
        raise DeserializationError("payload has no 'response' string")
    return payload["response"]