# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""Abstract transport interface for node handshakes.

Defines the contract that every transport backend (raw socket, TLS,
WebSocket) implements: connect, send one request, return one response.
"""

from abc import ABC, abstractmethod
from typing import Optional

from nodeshake.config import HandshakeConfig
from nodeshake.models import Endpoint, HandshakeRequest


class Transport(ABC):
    """Abstract base class for handshake transports.

    A transport is bound to one endpoint and one security mode. Each call
    to :meth:`exchange` opens its own connection and always releases it.

    Args:
        endpoint: Resolved address of the remote node.
        secure: Whether the connection is wrapped in TLS.
        config: Shared transport tunables.
    """

    def __init__(
        self,
        endpoint: Endpoint,
        secure: bool = False,
        config: Optional[HandshakeConfig] = None,
    ) -> None:
        self.endpoint = endpoint
        self.secure = secure
        self.config = config or HandshakeConfig()

    @property
    def remote(self) -> str:
        """The endpoint rendered as ``host:port``."""
        return str(self.endpoint)

    @abstractmethod
    async def exchange(
        self, payload: HandshakeRequest, timeout: Optional[float] = None
    ) -> str:
        """Connect, send ``payload`` and return the response frame as text.

        Args:
            payload: JSON-RPC request to send.
            timeout: Caller-supplied timeout in seconds. How it is applied
                is transport specific.

        Returns:
            The response as received, including any transport framing the
            caller is expected to strip.

        Raises:
            TransportError: On any connect, TLS, protocol or I/O failure.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.remote}, secure={self.secure})"


__all__ = [
    "Transport",
]
