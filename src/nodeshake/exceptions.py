# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""Centralized exception hierarchy for nodeshake.

All nodeshake exceptions inherit from NodeshakeError. Every transport
failure is normalized into exactly one TransportError subclass, each
tagged with an ErrorKind and the human-readable cause of the failure.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Shared taxonomy of transport failures."""

    ADDRESS_RESOLUTION = "address_resolution"
    CONNECTION = "connection"
    TLS = "tls"
    PROTOCOL = "protocol"
    ENCODING = "encoding"
    IO = "io"
    OTHER = "other"


class NodeshakeError(Exception):
    """Base exception for all nodeshake errors."""


class ConfigurationError(NodeshakeError):
    """Invalid configuration value or environment override."""


class TransportError(NodeshakeError):
    """A handshake failed somewhere between connect and receive.

    Args:
        cause: Human-readable description of the underlying failure.
    """

    kind: ErrorKind = ErrorKind.OTHER

    def __init__(self, cause: str) -> None:
        super().__init__(cause)
        self.cause = cause

    @staticmethod
    def for_kind(kind: ErrorKind, cause: str) -> "TransportError":
        """Build the TransportError subclass registered for ``kind``."""
        return _ERRORS_BY_KIND[kind](cause)


class AddressResolutionError(TransportError):
    """Endpoint cannot be used to form a connection (e.g. invalid TLS name)."""

    kind = ErrorKind.ADDRESS_RESOLUTION


class TransportConnectionError(TransportError):
    """Socket or WebSocket connect failure, or the peer closed the connection."""

    kind = ErrorKind.CONNECTION


class TLSError(TransportError):
    """TLS handshake or certificate validation failure."""

    kind = ErrorKind.TLS


class ProtocolError(TransportError):
    """Malformed frame, capacity exceeded, or unexpected message structure."""

    kind = ErrorKind.PROTOCOL


class EncodingError(TransportError):
    """Non-UTF-8 payload where text was required."""

    kind = ErrorKind.ENCODING


class TransportIOError(TransportError):
    """Generic read/write failure not otherwise classified."""

    kind = ErrorKind.IO


class UnknownTransportError(TransportError):
    """Catch-all for unrecognized transport-layer failures."""

    kind = ErrorKind.OTHER


_ERRORS_BY_KIND: dict[ErrorKind, type[TransportError]] = {
    ErrorKind.ADDRESS_RESOLUTION: AddressResolutionError,
    ErrorKind.CONNECTION: TransportConnectionError,
    ErrorKind.TLS: TLSError,
    ErrorKind.PROTOCOL: ProtocolError,
    ErrorKind.ENCODING: EncodingError,
    ErrorKind.IO: TransportIOError,
    ErrorKind.OTHER: UnknownTransportError,
}


__all__ = [
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
