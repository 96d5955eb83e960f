# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""Normalization of transport failures into the shared error taxonomy.

:func:`map_error` is total: any exception maps to exactly one
:class:`~nodeshake.exceptions.TransportError` subclass, with unrecognized
failures folded into ``ErrorKind.OTHER``.
"""

from __future__ import annotations

import asyncio
import socket
import ssl

from websockets import exceptions as ws_exceptions
from websockets.frames import CloseCode

from .exceptions import ErrorKind, TransportConnectionError, TransportError

# First match wins; SSLError and gaierror must precede OSError.
_CLASSIFIERS: tuple[tuple[tuple[type[BaseException], ...], ErrorKind], ...] = (
    ((ws_exceptions.InvalidURI, socket.gaierror), ErrorKind.ADDRESS_RESOLUTION),
    ((ssl.SSLError, ssl.CertificateError), ErrorKind.TLS),
    (
        (
            ws_exceptions.PayloadTooBig,
            ws_exceptions.ProtocolError,
            ws_exceptions.InvalidHandshake,
            ws_exceptions.InvalidMessage,
        ),
        ErrorKind.PROTOCOL,
    ),
    ((UnicodeError,), ErrorKind.ENCODING),
    ((ConnectionError,), ErrorKind.CONNECTION),
    ((TimeoutError, asyncio.TimeoutError), ErrorKind.IO),
    ((OSError,), ErrorKind.IO),
)


# Close codes that reveal why a WebSocket connection was dropped.
_CLOSE_CODE_KINDS: dict[int, ErrorKind] = {
    CloseCode.PROTOCOL_ERROR: ErrorKind.PROTOCOL,
    CloseCode.INVALID_DATA: ErrorKind.ENCODING,
    CloseCode.MESSAGE_TOO_BIG: ErrorKind.PROTOCOL,
}


def _classify_closed(exc: ws_exceptions.ConnectionClosed) -> ErrorKind:
    for frame in (exc.sent, exc.rcvd):
        if frame is not None and frame.code in _CLOSE_CODE_KINDS:
            return _CLOSE_CODE_KINDS[frame.code]
    return ErrorKind.CONNECTION


def classify(exc: BaseException) -> ErrorKind:
    """Return the taxonomy kind for an exception."""
    if isinstance(exc, TransportError):
        return exc.kind
    if isinstance(exc, ws_exceptions.ConnectionClosed):
        return _classify_closed(exc)
    for types, kind in _CLASSIFIERS:
        if isinstance(exc, types):
            return kind
    return ErrorKind.OTHER


def describe(exc: BaseException) -> str:
    """Human-readable cause text, falling back to the exception type name."""
    text = str(exc).strip()
    if isinstance(exc, ws_exceptions.ConnectionClosed) and not text:
        text = "connection closed"
    return text or type(exc).__name__


def map_error(exc: BaseException) -> TransportError:
    """Translate ``exc`` into the shared taxonomy.

    TransportErrors are returned unchanged. The original message is kept
    as the cause.
    """
    if isinstance(exc, TransportError):
        return exc
    return TransportError.for_kind(classify(exc), describe(exc))


def map_connect_error(exc: BaseException) -> TransportError:
    """Translate a failure raised while opening a connection.

    Plain ``OSError``s count as connection failures here. asyncio raises one
    (``"Multiple exceptions: ..."``) when every resolved address refuses.
    TLS and name resolution failures keep their own kinds.
    """
    if isinstance(exc, OSError) and classify(exc) is ErrorKind.IO:
        return TransportConnectionError(describe(exc))
    return map_error(exc)


__all__ = [
    "classify",
    "describe",
    "map_connect_error",
    "map_error",
]
