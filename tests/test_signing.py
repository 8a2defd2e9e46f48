"""Tests for callback signature helpers."""

import hashlib
import hmac

from callmelater.webhooks import (
    SIGNATURE_HEADER,
    compute_signature,
    serialize_body,
    sign_payload,
    verify_signature,
)


def test_header_name() -> None:
    assert SIGNATURE_HEADER == "x-callmelater-signature"


def test_serialize_body_is_compact_and_ordered() -> None:
    body = {"event": "action.executed", "action_id": "a1", "nested": {"b": 1, "a": [1, 2]}}
    assert serialize_body(body) == '{"event":"action.executed","action_id":"a1","nested":{"b":1,"a":[1,2]}}'


def test_serialize_body_keeps_unicode() -> None:
    assert serialize_body({"comment": "très bien"}) == '{"comment":"très bien"}'


def test_serialize_body_escapes_unpaired_surrogates() -> None:
    assert serialize_body({"comment": "\ud800"}) == '{"comment":"\\ud800"}'
    assert serialize_body({"comment": "a\udfffb"}) == '{"comment":"a\\udfffb"}'


def test_signature_over_unpaired_surrogate_uses_escaped_form() -> None:
    expected = hmac.new(b"secret", b'{"comment":"\\ud800"}', hashlib.sha256).hexdigest()
    assert compute_signature({"comment": "\ud800"}, "secret") == f"sha256={expected}"


def test_sign_payload_matches_hmac() -> None:
    expected = hmac.new(b"secret", b"payload", hashlib.sha256).hexdigest()
    assert sign_payload(b"payload", "secret") == expected


def test_compute_signature_has_prefix() -> None:
    body = {"event": "action.failed"}
    signature = compute_signature(body, "secret")
    assert signature.startswith("sha256=")
    assert signature[len("sha256="):] == sign_payload(b'{"event":"action.failed"}', "secret")


def test_verify_round_trip() -> None:
    body = {"event": "action.expired", "action_id": "a9"}
    assert verify_signature(body, compute_signature(body, "s3cret"), "s3cret") is True


def test_verify_rejects_wrong_secret_and_empty() -> None:
    body = {"event": "action.expired"}
    assert verify_signature(body, compute_signature(body, "one"), "two") is False
    assert verify_signature(body, "", "two") is False
    assert verify_signature(body, None, "two") is False


def test_verify_is_case_sensitive() -> None:
    body = {"event": "action.expired"}
    signature = compute_signature(body, "s")
    assert verify_signature(body, signature.upper(), "s") is False
