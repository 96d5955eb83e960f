"""Tests for the handshake data model."""

import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from nodeshake.models import (
    Endpoint,
    HandshakeRequest,
    NodeVersion,
    TransportKind,
    parse_version,
)


# ---------------------------------------------------------------------------
# TransportKind
# ---------------------------------------------------------------------------


class TestTransportKind:
    """Tests for TransportKind flags and mapping."""

    @pytest.mark.parametrize(
        "websocket,secure,expected",
        [
            (False, False, TransportKind.PLAIN),
            (False, True, TransportKind.TLS),
            (True, False, TransportKind.WEBSOCKET),
            (True, True, TransportKind.SECURE_WEBSOCKET),
        ],
    )
    def test_from_flags(self, websocket, secure, expected):
        kind = TransportKind.from_flags(websocket=websocket, secure=secure)
        assert kind is expected
        assert kind.is_secure is secure
        assert kind.is_websocket is websocket

    def test_values(self):
        assert [k.value for k in TransportKind] == ["tcp", "tls", "ws", "wss"]


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------


class TestEndpoint:
    """Tests for Endpoint parsing and rendering."""

    def test_parse_host_port(self):
        ep = Endpoint.parse("api.devnet.solana.com:443")
        assert ep.host == "api.devnet.solana.com"
        assert ep.port == 443
        assert str(ep) == "api.devnet.solana.com:443"
        assert ep.is_ip is False

    def test_parse_ipv4(self):
        ep = Endpoint.parse("127.0.0.1:8899")
        assert ep.is_ip is True
        assert str(ep) == "127.0.0.1:8899"

    def test_parse_bracketed_ipv6(self):
        ep = Endpoint.parse("[::1]:8900")
        assert ep.host == "::1"
        assert str(ep) == "[::1]:8900"

    @pytest.mark.parametrize(
        "target",
        ["localhost", ":8080", "localhost:", "localhost:http", "localhost:65536"],
    )
    def test_parse_failures(self, target):
        with pytest.raises(ValueError):
            Endpoint.parse(target)

    @pytest.mark.parametrize("target", ["::1", "::1:8900", "fe80::1:443"])
    def test_parse_rejects_unbracketed_ipv6(self, target):
        with pytest.raises(ValueError, match="bracketed"):
            Endpoint.parse(target)

    def test_endpoint_is_frozen(self):
        ep = Endpoint(host="localhost", port=1024)
        with pytest.raises(ValidationError):
            ep.port = 2048  # type: ignore[misc]

    def test_empty_host_rejected(self):
        with pytest.raises(ValidationError):
            Endpoint(host="  ", port=80)

    @given(port=st.integers(min_value=0, max_value=65535))
    @settings(max_examples=100)
    def test_any_valid_port_round_trips(self, port: int):
        assert Endpoint.parse(f"localhost:{port}").port == port


# ---------------------------------------------------------------------------
# HandshakeRequest
# ---------------------------------------------------------------------------


class TestHandshakeRequest:
    """Tests for the JSON-RPC request payload."""

    def test_default_payload(self):
        assert json.loads(HandshakeRequest().to_json()) == {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "getVersion",
        }

    def test_wire_text(self):
        assert HandshakeRequest().to_json() == '{"jsonrpc":"2.0","id":1,"method":"getVersion"}'

    def test_payload_is_deterministic(self):
        assert HandshakeRequest().to_json().encode() == HandshakeRequest().to_json().encode()

    def test_version_tag_is_fixed(self):
        with pytest.raises(ValidationError):
            HandshakeRequest(jsonrpc="1.0")  # type: ignore[arg-type]

    @given(method=st.text(min_size=1, max_size=40), request_id=st.integers(min_value=0))
    @settings(max_examples=100)
    def test_same_method_same_bytes(self, method: str, request_id: int):
        first = HandshakeRequest(id=request_id, method=method).to_json()
        second = HandshakeRequest(id=request_id, method=method).to_json()
        assert first == second


# ---------------------------------------------------------------------------
# NodeVersion
# ---------------------------------------------------------------------------


class TestParseVersion:
    """Tests for decoding getVersion responses."""

    def test_jsonrpc_envelope(self):
        body = '{"jsonrpc":"2.0","result":{"feature-set":3469865029,"solana-core":"1.18.11"},"id":1}'
        version = parse_version(body)
        assert version == NodeVersion(solana_core="1.18.11", feature_set=3469865029)

    def test_bare_result(self):
        version = parse_version('{"solana-core":"1.17.0"}')
        assert version.solana_core == "1.17.0"
        assert version.feature_set is None

    def test_rpc_error(self):
        body = '{"jsonrpc":"2.0","error":{"code":-32601,"message":"Method not found"},"id":1}'
        with pytest.raises(ValueError, match="error"):
            parse_version(body)

    @pytest.mark.parametrize("body", ["", "not json", "[]", '{"result":{"version":"x"}}'])
    def test_unusable_bodies(self, body):
        with pytest.raises(ValueError):
            parse_version(body)
