# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""
Handshake Client

Single request/response handshake with an RPC node: build the
``getVersion`` request, send it over the selected transport, and strip
the transport envelope from the reply.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .config import HandshakeConfig
from .errors import map_error
from .exceptions import TransportError, TransportIOError
from .models import Endpoint, HandshakeRequest, TransportKind
from .transport import select_transport

logger = logging.getLogger(__name__)

HEADER_SEPARATOR = "\r\n\r\n"


def build_payload(method: str = "getVersion", request_id: int = 1) -> HandshakeRequest:
    """Build the JSON-RPC handshake request."""
    return HandshakeRequest(id=request_id, method=method)


def strip_http_headers(frame: str) -> str:
    """Return the body after the first blank line of an HTTP frame.

    A frame without a header separator is returned unchanged.
    """
    head, sep, body = frame.partition(HEADER_SEPARATOR)
    if not sep:
        return frame
    return body


class HandshakeClient:
    """Performs handshakes with remote nodes.

    Holds no per-call state; one client can run any number of concurrent
    handshakes.

    Args:
        config: Transport tunables passed to every selected transport.
    """

    def __init__(self, config: Optional[HandshakeConfig] = None) -> None:
        self.config = config or HandshakeConfig()

    async def perform(
        self,
        endpoint: Endpoint,
        kind: TransportKind,
        timeout: Optional[float] = None,
    ) -> str:
        """Run one handshake and return the response body as text.

        Args:
            endpoint: Resolved address of the node.
            kind: Transport to use.
            timeout: Seconds allowed for the whole exchange. None applies
                no deadline.

        Returns:
            The response body with HTTP headers or WebSocket framing removed.

        Raises:
            TransportError: If any step of the handshake fails.
            ValueError: If ``timeout`` is not positive.
        """
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")

        kind = TransportKind(kind)
        payload = build_payload()
        transport = select_transport(kind, endpoint, self.config)
        logger.info("Connecting to %s over %s", endpoint, kind.value)

        try:
            if timeout is None:
                frame = await transport.exchange(payload, timeout)
            else:
                frame = await asyncio.wait_for(transport.exchange(payload, timeout), timeout)
        except asyncio.TimeoutError as exc:
            raise TransportIOError(
                f"Handshake with {endpoint} exceeded {timeout}s timeout"
            ) from exc
        except TransportError:
            raise
        except Exception as exc:
            raise map_error(exc) from exc

        if kind.is_websocket:
            body = frame
        else:
            body = strip_http_headers(frame)
        logger.info("Handshake response was %r", body)
        return body


async def perform_handshake(
    endpoint: Endpoint,
    kind: TransportKind,
    timeout: Optional[float] = None,
    config: Optional[HandshakeConfig] = None,
) -> str:
    """Convenience wrapper around :meth:`HandshakeClient.perform`."""
    return await HandshakeClient(config).perform(endpoint, kind, timeout)


__all__ = [
    "HEADER_SEPARATOR",
    "HandshakeClient",
    "build_payload",
    "perform_handshake",
    "strip_http_headers",
]
