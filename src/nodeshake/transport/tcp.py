# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""Raw socket transport for node handshakes.

Sends a minimal hand-built HTTP/1.1 POST over a TCP stream, optionally
wrapped in TLS, and returns the response frame including its headers.

The plain TCP path performs a single read of ``read_buffer_size`` bytes
and returns it without accumulating further reads, so replies larger than
the buffer are truncated. The TLS path reads until the peer closes.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import re
import socket
import ssl
from typing import Optional

from nodeshake.errors import map_connect_error, map_error
from nodeshake.exceptions import AddressResolutionError, TransportError
from nodeshake.models import HandshakeRequest

from .base import Transport

logger = logging.getLogger(__name__)

_DNS_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


def build_request_frame(host: str, body: str) -> bytes:
    """Frame ``body`` as an HTTP/1.1 JSON POST to ``/``.

    Args:
        host: Value of the ``Host`` header (``host:port``).
        body: Serialized JSON payload.
    """
    encoded = body.encode("utf-8")
    header = (
        "POST / HTTP/1.1\r\n"
        f"Host: {host}\r\n"
        "Content-Type: application/json\r\n"
        "Connection: close\r\n"
        f"Content-Length: {len(encoded)}\r\n"
        "\r\n"
    )
    return header.encode("utf-8") + encoded + b"\r\n"


def validate_server_name(host: str) -> str:
    """Check that ``host`` can be used as a TLS server name.

    IP literals and syntactically valid DNS names are accepted.

    Raises:
        AddressResolutionError: If ``host`` is neither.
    """
    try:
        return str(ipaddress.ip_address(host))
    except ValueError:
        pass
    name = host[:-1] if host.endswith(".") else host
    if not name or len(name) > 253 or not all(_DNS_LABEL.match(p) for p in name.split(".")):
        raise AddressResolutionError(f"Invalid DNS name: {host!r}")
    return name


def create_tls_context(ca_file: Optional[str] = None) -> ssl.SSLContext:
    """Client TLS context trusting the public root CAs, without a client cert.

    Args:
        ca_file: PEM bundle to trust instead of the default CA store.
    """
    return ssl.create_default_context(ssl.Purpose.SERVER_AUTH, cafile=ca_file)


class RawSocketTransport(Transport):
    """HTTP-over-socket transport, plain TCP or TLS-wrapped.

    Returns the full response frame; the handshake client strips the
    header block.
    """

    async def exchange(
        self, payload: HandshakeRequest, timeout: Optional[float] = None
    ) -> str:
        frame = build_request_frame(self.remote, payload.to_json())
        try:
            if self.secure:
                return await self._exchange_secure(frame)
            return await self._exchange_plain(frame, timeout)
        except TransportError:
            raise
        except Exception as exc:
            raise map_error(exc) from exc

    async def _exchange_secure(self, frame: bytes) -> str:
        server_name = validate_server_name(self.endpoint.host)
        context = create_tls_context(self.config.ca_file)
        reader, writer = await self._open(ssl=context, server_hostname=server_name)
        try:
            writer.write(frame)
            await writer.drain()
            logger.info("Sent %d byte request to %s over TLS", len(frame), self.remote)
            data = await reader.read()
        finally:
            await _close(writer)
        logger.info("Received message of length %d", len(data))
        return data.decode("utf-8", errors="replace")

    async def _exchange_plain(self, frame: bytes, timeout: Optional[float]) -> str:
        reader, writer = await self._open()
        try:
            self._set_ttl(writer, timeout)
            writer.write(frame)
            await writer.drain()
            logger.info("Sent message payload %s", frame.decode("utf-8", errors="replace"))
            # Single read, no accumulation.
            data = await reader.read(self.config.read_buffer_size)
        finally:
            await _close(writer)
        logger.info("Received message of length %d", len(data))
        response = data.decode("utf-8", errors="replace")
        logger.debug("Received message was %s", response)
        return response.rstrip()

    async def _open(self, **kwargs) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
        try:
            return await asyncio.open_connection(self.endpoint.host, self.endpoint.port, **kwargs)
        except Exception as exc:
            raise map_connect_error(exc) from exc

    def _set_ttl(self, writer: asyncio.StreamWriter, timeout: Optional[float]) -> None:
        """Best-effort IP TTL hint derived from the timeout."""
        ttl = int(timeout) if timeout is not None else self.config.default_ttl
        sock = writer.get_extra_info("socket")
        if sock is None:
            return
        try:
            if sock.family == socket.AF_INET6:
                sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_UNICAST_HOPS, ttl)
            else:
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, ttl)
        except (OSError, OverflowError, AttributeError) as exc:
            logger.debug("Could not set TTL %d on %s: %s", ttl, self.remote, exc)


async def _close(writer: asyncio.StreamWriter) -> None:
    writer.close()
    try:
        await writer.wait_closed()
    except OSError as exc:
        logger.debug("Error while closing connection: %s", exc)


__all__ = [
    "RawSocketTransport",
    "build_request_frame",
    "create_tls_context",
    "validate_server_name",
]
