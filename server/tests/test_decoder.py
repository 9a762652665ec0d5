"""Tests for the webhook payload decoder."""
import json
from datetime import datetime, timedelta, timezone

import pytest

from exceptions import DecodeError, UnsupportedVersionError
from services.decoder import SUPPORTED_WEBHOOK_VERSION, decode


def _raw(payload) -> bytes:
    return json.dumps(payload).encode()


def test_decode_valid_payload(payload):
    group = decode(_raw(payload))

    assert group.version == SUPPORTED_WEBHOOK_VERSION
    assert group.receiver == "ops"
    assert group.status == "firing"
    assert group.external_url == "http://alertmanager:9093"
    assert group.group_key == '{}:{alertname="HighLoad"}'
    assert group.common_labels == {"severity": "critical"}
    assert group.group_labels == {}
    assert [a.fingerprint for a in group.alerts] == ["f1", "f2"]
    assert group.alerts[0].starts_at == datetime(2024, 1, 8, 10, 30, tzinfo=timezone.utc)


def test_open_ended_sentinel(payload):
    """endsAt before startsAt means the alert has not ended."""
    group = decode(_raw(payload))

    assert group.alerts[0].is_open_ended is True
    assert group.alerts[1].is_open_ended is False
    assert group.alerts[1].ends_at == datetime(2024, 1, 8, 11, 0, tzinfo=timezone.utc)


def test_missing_ends_at_is_open_ended(payload):
    del payload["alerts"][0]["endsAt"]
    group = decode(_raw(payload))

    assert group.alerts[0].ends_at is None
    assert group.alerts[0].is_open_ended is True


def test_ends_at_equal_to_starts_at_is_closed(payload):
    payload["alerts"][1]["endsAt"] = payload["alerts"][1]["startsAt"]
    group = decode(_raw(payload))

    assert group.alerts[1].is_open_ended is False


def test_naive_timestamps_are_utc(payload):
    payload["alerts"][1]["startsAt"] = "2024-01-08T10:30:00"
    payload["alerts"][1]["endsAt"] = "2024-01-08T11:00:00+00:00"
    group = decode(_raw(payload))

    alert = group.alerts[1]
    assert alert.starts_at.tzinfo is not None
    assert alert.is_open_ended is False


@pytest.mark.parametrize("version", ["3", "5", "", "4.0"])
def test_unsupported_version_rejected(payload, version):
    payload["version"] = version

    with pytest.raises(UnsupportedVersionError) as exc_info:
        decode(_raw(payload))
    assert exc_info.value.version == version


def test_missing_version_rejected(payload):
    del payload["version"]

    with pytest.raises(UnsupportedVersionError):
        decode(_raw(payload))


@pytest.mark.parametrize("raw", [b"", b"   ", b"not json", b"[1, 2, 3]", b'{"version": "4"'])
def test_malformed_payload_rejected(raw):
    with pytest.raises(DecodeError):
        decode(raw)


def test_missing_starts_at_rejected(payload):
    del payload["alerts"][0]["startsAt"]

    with pytest.raises(DecodeError) as exc_info:
        decode(_raw(payload))
    assert "alerts.0.startsAt" in str(exc_info.value)


def test_unknown_status_rejected(payload):
    payload["status"] = "pending"

    with pytest.raises(DecodeError):
        decode(_raw(payload))


def test_non_string_label_value_rejected(payload):
    payload["commonLabels"] = {"severity": {"nested": "object"}}

    with pytest.raises(DecodeError):
        decode(_raw(payload))


def test_zero_alert_group_is_accepted(payload):
    payload["alerts"] = []
    group = decode(_raw(payload))

    assert group.alerts == []


def test_decoded_group_is_immutable(payload):
    group = decode(_raw(payload))

    with pytest.raises(Exception):
        group.receiver = "someone-else"


def test_offset_timestamps_are_normalized_to_utc(payload):
    payload["alerts"][1]["startsAt"] = "2024-01-08T12:30:00+02:00"
    group = decode(_raw(payload))

    assert group.alerts[1].starts_at.utcoffset() == timedelta(0)
    assert group.alerts[1].starts_at.hour == 10


@pytest.mark.parametrize(
    "field, value",
    [
        ("startsAt", "0001-01-01T00:30:00+01:00"),
        ("startsAt", "9999-12-31T23:30:00-01:00"),
        ("endsAt", "0001-01-01T00:00:00+01:00"),
    ],
)
def test_timestamp_outside_utc_range_rejected(payload, field, value):
    payload["alerts"][0][field] = value

    with pytest.raises(DecodeError) as exc_info:
        decode(_raw(payload))
    assert f"alerts.0.{field}" in str(exc_info.value)
