# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""Data model for a single node handshake.

Endpoint and TransportKind describe where and how to connect,
HandshakeRequest is the JSON-RPC envelope sent to the node, and
NodeVersion is the decoded ``getVersion`` result shown by the CLI.
"""

from __future__ import annotations

import ipaddress
import json
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

JSONRPC_VERSION = "2.0"
HANDSHAKE_METHOD = "getVersion"


class TransportKind(str, Enum):
    """Wire transport used for the handshake."""

    PLAIN = "tcp"
    TLS = "tls"
    WEBSOCKET = "ws"
    SECURE_WEBSOCKET = "wss"

    @property
    def is_secure(self) -> bool:
        """Whether the transport runs over TLS."""
        return self in (TransportKind.TLS, TransportKind.SECURE_WEBSOCKET)

    @property
    def is_websocket(self) -> bool:
        """Whether the transport uses WebSocket message framing."""
        return self in (TransportKind.WEBSOCKET, TransportKind.SECURE_WEBSOCKET)

    @classmethod
    def from_flags(cls, websocket: bool, secure: bool) -> "TransportKind":
        """Map a transport family and a security flag onto a kind."""
        if websocket:
            return cls.SECURE_WEBSOCKET if secure else cls.WEBSOCKET
        return cls.TLS if secure else cls.PLAIN


class Endpoint(BaseModel):
    """A resolved network address. Never re-resolved once built."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(..., description="Hostname or IP literal")
    port: int = Field(..., ge=0, le=65535, description="TCP port")

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Endpoint host must not be empty")
        # Accept "[::1]" as well as "::1"
        if v.startswith("[") and v.endswith("]"):
            v = v[1:-1]
        return v

    @property
    def is_ip(self) -> bool:
        """Whether the host is an IP literal rather than a name."""
        try:
            ipaddress.ip_address(self.host)
        except ValueError:
            return False
        return True

    @classmethod
    def parse(cls, target: str) -> "Endpoint":
        """Build an endpoint from ``host:port`` text.

        Raises:
            ValueError: If the port is missing or not a number in range.
        """
        host, sep, port = target.strip().rpartition(":")
        if not sep or not host:
            raise ValueError(f"Expected HOST:PORT, got {target!r}")
        if ":" in host and not (host.startswith("[") and host.endswith("]")):
            raise ValueError(f"IPv6 addresses must be bracketed, got {target!r}")
        if not port.isdigit():
            raise ValueError(f"Invalid port in {target!r}")
        try:
            return cls(host=host, port=int(port))
        except ValidationError as exc:
            raise ValueError(f"Invalid endpoint {target!r}: {exc.errors()[0]['msg']}") from exc

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


class HandshakeRequest(BaseModel):
    """JSON-RPC request envelope sent as the handshake payload."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: int = 1
    method: str = HANDSHAKE_METHOD

    def to_json(self) -> str:
        """Compact JSON text with a fixed ``jsonrpc, id, method`` field order."""
        return json.dumps(self.model_dump(), separators=(",", ":"))


class NodeVersion(BaseModel):
    """Result of a ``getVersion`` call."""

    model_config = ConfigDict(populate_by_name=True)

    solana_core: str = Field(..., alias="solana-core", description="Node software version")
    feature_set: Optional[int] = Field(
        None, alias="feature-set", description="Feature set identifier"
    )


def parse_version(body: str) -> NodeVersion:
    """Decode a handshake response body into a NodeVersion.

    Accepts either a full JSON-RPC response (``{"result": {...}}``) or a
    bare result object.

    Raises:
        ValueError: If the body is not JSON or has no version fields.
    """
    try:
        data: Any = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Response is not JSON: {exc}") from exc
    if isinstance(data, dict) and "error" in data:
        raise ValueError(f"Node returned an error: {data['error']}")
    if isinstance(data, dict) and "result" in data:
        data = data["result"]
    try:
        return NodeVersion.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Response has no version information: {exc}") from exc


__all__ = [
    "JSONRPC_VERSION",
    "HANDSHAKE_METHOD",
    "TransportKind",
    "Endpoint",
    "HandshakeRequest",
    "NodeVersion",
    "parse_version",
]
