# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""Nodeshake Transport Layer.

Pluggable backends for a single request/response handshake:
- **Raw socket** — hand-framed HTTP/1.1 POST over TCP, optionally TLS.
- **WebSocket** — one text frame out, the first data message back.
"""

from .base import Transport
from .selector import select_transport
from .tcp import RawSocketTransport, build_request_frame, validate_server_name
from .websocket import WebSocketTransport, normalize_url

__all__ = [
    # Base
    "Transport",
    "select_transport",
    # Raw socket
    "RawSocketTransport",
    "build_request_frame",
    "validate_server_name",
    # WebSocket
    "WebSocketTransport",
    "normalize_url",
]
