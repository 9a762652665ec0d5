"""Webhook payload decoder - turns raw request bytes into an AlertGroup."""
from pydantic import ValidationError

from exceptions import DecodeError, UnsupportedVersionError
from schemas.webhook import AlertGroup

# Alertmanager webhook data version this app understands
SUPPORTED_WEBHOOK_VERSION = "4"


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ())) or "payload"
        parts.append(f"{location}: {err.get('msg')}")
    return "; ".join(parts)


def decode(raw: bytes) -> AlertGroup:
    """
    Parse and validate a webhook payload.

    Args:
        raw: Request body as received

    Returns:
        The decoded AlertGroup

    Raises:
        DecodeError: payload is not a valid webhook document
        UnsupportedVersionError: payload version is not SUPPORTED_WEBHOOK_VERSION
    """
    if not raw or not raw.strip():
        raise DecodeError("empty payload")

    try:
        group = AlertGroup.model_validate_json(raw)
    except ValidationError as e:
        raise DecodeError(f"invalid payload: {_describe(e)}") from e

    if group.version != SUPPORTED_WEBHOOK_VERSION:
        raise UnsupportedVersionError(group.version, SUPPORTED_WEBHOOK_VERSION)

    return group
