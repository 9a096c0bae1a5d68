"""
Tests for client address extraction and fingerprinting (guestbook.core.ip_extraction).
"""
import hashlib
from unittest.mock import MagicMock

import pytest
from fastapi import Request

from guestbook.core.ip_extraction import (
    UNKNOWN,
    get_client_ip,
    get_user_agent,
    hash_client_ip,
)


def _create_mock_request(
    headers: dict | None = None,
    client_host: str | None = "127.0.0.1",
) -> MagicMock:
    """Create a mock request with the given headers and peer address."""
    request = MagicMock(spec=Request)
    headers = headers or {}
    request.headers.get = lambda key, default=None: headers.get(key, default)

    if client_host:
        request.client = MagicMock()
        request.client.host = client_host
    else:
        request.client = None

    return request


class TestGetClientIP:
    """Tests for get_client_ip."""

    def test_uses_trusted_header_when_present(self):
        request = _create_mock_request({"CF-Connecting-IP": "203.0.113.50"})

        assert get_client_ip(request) == "203.0.113.50"

    def test_strips_whitespace_from_header(self):
        request = _create_mock_request({"CF-Connecting-IP": "  203.0.113.50  "})

        assert get_client_ip(request) == "203.0.113.50"

    def test_uses_first_of_comma_separated_values(self):
        request = _create_mock_request({"CF-Connecting-IP": "203.0.113.1, 10.0.0.1"})

        assert get_client_ip(request) == "203.0.113.1"

    def test_falls_back_to_peer_address(self):
        request = _create_mock_request(client_host="192.168.1.100")

        assert get_client_ip(request) == "192.168.1.100"

    def test_empty_header_falls_back_to_peer_address(self):
        request = _create_mock_request(
            {"CF-Connecting-IP": " , "}, client_host="192.168.1.100"
        )

        assert get_client_ip(request) == "192.168.1.100"

    @pytest.mark.parametrize("header", ["X-Forwarded-For", "X-Real-IP"])
    def test_ignores_spoofable_headers(self, header):
        """Test that client-controlled forwarding headers are never trusted."""
        request = _create_mock_request({header: "1.2.3.4"}, client_host="192.168.1.100")

        assert get_client_ip(request) == "192.168.1.100"

    def test_custom_trusted_header(self):
        request = _create_mock_request(
            {"X-Envoy-External-Address": "198.51.100.4", "CF-Connecting-IP": "1.1.1.1"}
        )

        result = get_client_ip(request, trusted_header="X-Envoy-External-Address")

        assert result == "198.51.100.4"

    def test_unknown_when_nothing_available(self):
        request = _create_mock_request(client_host=None)

        assert get_client_ip(request) == UNKNOWN


class TestHashClientIP:
    """Tests for hash_client_ip."""

    def test_first_16_hex_chars_of_sha256(self):
        expected = hashlib.sha256(b"203.0.113.7").hexdigest()[:16]

        assert hash_client_ip("203.0.113.7") == expected

    def test_is_deterministic(self):
        assert hash_client_ip("10.0.0.1") == hash_client_ip("10.0.0.1")

    def test_different_addresses_differ(self):
        assert hash_client_ip("10.0.0.1") != hash_client_ip("10.0.0.2")

    def test_custom_length(self):
        result = hash_client_ip("10.0.0.1", length=64)

        assert result == hashlib.sha256(b"10.0.0.1").hexdigest()

    def test_unknown_is_hashed(self):
        result = hash_client_ip(UNKNOWN)

        assert len(result) == 16
        assert result != UNKNOWN


class TestGetUserAgent:
    """Tests for get_user_agent."""

    def test_returns_header(self):
        request = _create_mock_request({"User-Agent": "Mozilla/5.0"})

        assert get_user_agent(request) == "Mozilla/5.0"

    def test_truncates_to_255(self):
        request = _create_mock_request({"User-Agent": "x" * 1000})

        assert get_user_agent(request) == "x" * 255

    def test_custom_max_length(self):
        request = _create_mock_request({"User-Agent": "Mozilla/5.0"})

        assert get_user_agent(request, max_length=7) == "Mozilla"

    def test_missing_header_is_unknown(self):
        request = _create_mock_request()

        assert get_user_agent(request) == UNKNOWN
