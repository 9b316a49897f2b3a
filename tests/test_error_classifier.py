"""Unit tests for failure classification."""

import httpx
import pytest

from docuextract.domain.errors.classifier import ErrorKind, build_advisory, classify_error


class TestClassifyError:
    """Message-based rules, in order."""

    def test_network(self):
        advisory = classify_error(Exception("Failed to fetch"))
        assert advisory.kind is ErrorKind.NETWORK
        assert advisory.title == "Network Interrupted"
        assert advisory.message == "Could not establish connection."
        assert advisory.suggestion == "Check your connection."

    def test_safety_block(self):
        advisory = classify_error(RuntimeError("Response blocked by safety filters (SAFETY)"))
        assert advisory.kind is ErrorKind.FORMAT
        assert advisory.title == "Content Blocked"
        assert advisory.message == "AI flagged content."
        assert advisory.suggestion == "Try another document."

    def test_quality(self):
        advisory = classify_error(ValueError("Unexpected token < in JSON at position 0"))
        assert advisory.kind is ErrorKind.QUALITY
        assert advisory.title == "Extraction Failed"
        assert advisory.suggestion == "Ensure document is clear."

    def test_empty_response_is_quality(self):
        assert classify_error(RuntimeError("Empty response from AI")).kind is ErrorKind.QUALITY

    def test_service_echoes_raw_text(self):
        advisory = classify_error(RuntimeError("Quota exceeded"))
        assert advisory.kind is ErrorKind.SERVICE
        assert advisory.title == "Engine Error"
        assert advisory.message == "Quota exceeded"
        assert advisory.suggestion == "Try refreshing."

    def test_first_rule_wins(self):
        # both "network" and "json" present
        assert classify_error("network error while parsing JSON").kind is ErrorKind.NETWORK

    def test_case_insensitive(self):
        assert classify_error("OFFLINE").kind is ErrorKind.NETWORK
        assert classify_error("Blocked").kind is ErrorKind.FORMAT


class TestUnusualInputs:
    def test_none_and_empty(self):
        for value in (None, "", Exception()):
            advisory = classify_error(value)
            assert advisory.kind is ErrorKind.SERVICE
            assert advisory.message == "Unexpected error."

    def test_transport_error_is_network(self):
        advisory = classify_error(httpx.ConnectError("[Errno 111] Connection refused"))
        assert advisory.kind is ErrorKind.NETWORK

    def test_unprintable_error(self):
        class Weird(Exception):
            def __str__(self):
                raise RuntimeError("boom")

        advisory = classify_error(Weird())
        assert advisory.kind is ErrorKind.SERVICE
        assert advisory.message == "Weird"


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_build_advisory_has_all_texts(kind):
    advisory = build_advisory(kind, "raw")
    assert advisory.title and advisory.message and advisory.suggestion
