# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""
nodeshake - Handshake probe for RPC nodes

Sends a single JSON-RPC ``getVersion`` request to a node over plain TCP,
TLS, WebSocket or secure WebSocket and returns the raw response body.

Version: 0.1.0
"""

__version__ = "0.1.0"

from .client import HandshakeClient, perform_handshake, strip_http_headers
from .config import HandshakeConfig
from .errors import map_error
from .exceptions import (
    AddressResolutionError,
    ConfigurationError,
    EncodingError,
    ErrorKind,
    NodeshakeError,
    ProtocolError,
    TLSError,
    TransportConnectionError,
    TransportError,
    TransportIOError,
    UnknownTransportError,
)
from .models import Endpoint, HandshakeRequest, NodeVersion, TransportKind, parse_version
from .transport import RawSocketTransport, Transport, WebSocketTransport, select_transport

__all__ = [
    # Version
    "__version__",
    # Client
    "HandshakeClient",
    "perform_handshake",
    "strip_http_headers",
    "HandshakeConfig",
    # Model
    "Endpoint",
    "TransportKind",
    "HandshakeRequest",
    "NodeVersion",
    "parse_version",
    # Transports
    "Transport",
    "RawSocketTransport",
    "WebSocketTransport",
    "select_transport",
    # Errors
    "map_error",
    "ErrorKind",
    "NodeshakeError",
    "ConfigurationError",
    "TransportError",
    "AddressResolutionError",
    "TransportConnectionError",
    "TLSError",
    "ProtocolError",
    "EncodingError",
    "TransportIOError",
    "UnknownTransportError",
]
