"""Unit tests for RequestDecoder — form parsing and payload validation."""

from __future__ import annotations

import json
from urllib.parse import urlencode

import pytest

from githook.core.decoder import RequestDecoder, parse_form
from githook.core.errors import DecodeError, InvalidJSON, MalformedQuery, MissingPayload


def _body(payload: object) -> bytes:
    raw = payload if isinstance(payload, str) else json.dumps(payload)
    return urlencode({"payload": raw}).encode("utf-8")


class TestParseForm:
    def test_parses_pairs(self):
        assert parse_form(b"a=1&b=two") == {"a": ["1"], "b": ["two"]}

    def test_empty_body_is_empty_form(self):
        assert parse_form(b"") == {}

    def test_invalid_escape_rejected(self):
        with pytest.raises(MalformedQuery, match="invalid URL escape"):
            parse_form(b"payload=%zz")

    def test_semicolon_rejected(self):
        with pytest.raises(MalformedQuery, match="semicolon"):
            parse_form(b"a=1;b=2")

    def test_non_utf8_rejected(self):
        with pytest.raises(MalformedQuery):
            parse_form(b"payload=\xff\xfe")


class TestRequestDecoder:
    """The decoder must return a repository name or a specific DecodeError."""

    def test_decodes_repository_name(self, make_webhook_body):
        assert RequestDecoder().decode(make_webhook_body("repo1")) == "repo1"

    def test_plus_encoded_spaces_are_decoded(self):
        body = b"payload=%7B%22repository%22%3A+%7B%22name%22%3A+%22r%22%7D%7D"
        assert RequestDecoder().decode(body) == "r"

    def test_missing_payload(self):
        with pytest.raises(MissingPayload, match="missing 'payload'"):
            RequestDecoder().decode(b"other=1")

    def test_empty_payload_counts_as_missing(self):
        with pytest.raises(MissingPayload):
            RequestDecoder().decode(b"payload=")

    def test_payload_not_json(self):
        with pytest.raises(InvalidJSON, match="Unable to decode payload json"):
            RequestDecoder().decode(_body("{not json"))

    def test_payload_without_repository(self):
        with pytest.raises(InvalidJSON):
            RequestDecoder().decode(_body({"ref": "refs/heads/main"}))

    def test_repository_name_must_be_string(self):
        with pytest.raises(InvalidJSON):
            RequestDecoder().decode(_body({"repository": {"name": 42}}))

    def test_extra_fields_ignored(self):
        payload = {
            "ref": "refs/heads/main",
            "repository": {"name": "site", "owner": {"login": "acme"}},
            "commits": [],
        }
        assert RequestDecoder().decode(_body(payload)) == "site"

    def test_all_failures_are_decode_errors(self):
        for body in (b"%", b"x=1", _body("[]")):
            with pytest.raises(DecodeError):
                RequestDecoder().decode(body)

    def test_decoding_is_repeatable(self, make_webhook_body):
        decoder = RequestDecoder()
        body = make_webhook_body("repo1")
        assert decoder.decode(body) == decoder.decode(body) == "repo1"
