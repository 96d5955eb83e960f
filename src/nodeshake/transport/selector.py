# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""Selection of the transport backend for a TransportKind."""

from __future__ import annotations

from typing import Optional

from nodeshake.config import HandshakeConfig
from nodeshake.models import Endpoint, TransportKind

from .base import Transport
from .tcp import RawSocketTransport
from .websocket import WebSocketTransport

_BACKENDS: dict[TransportKind, type[Transport]] = {
    TransportKind.PLAIN: RawSocketTransport,
    TransportKind.TLS: RawSocketTransport,
    TransportKind.WEBSOCKET: WebSocketTransport,
    TransportKind.SECURE_WEBSOCKET: WebSocketTransport,
}


def select_transport(
    kind: TransportKind,
    endpoint: Endpoint,
    config: Optional[HandshakeConfig] = None,
) -> Transport:
    """Build the transport for ``kind`` bound to ``endpoint``.

    Performs no I/O. Every TransportKind has a backend.
    """
    kind = TransportKind(kind)
    backend = _BACKENDS[kind]
    return backend(endpoint, secure=kind.is_secure, config=config)


__all__ = [
    "select_transport",
]
