# Copyright (c) Nodeshake Contributors. All rights reserved.
# Licensed under the MIT License.
"""Handshake configuration.

Defaults can be overridden through ``NODESHAKE_*`` environment variables
via :meth:`HandshakeConfig.from_env`.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

ENV_PREFIX = "NODESHAKE_"

DEFAULT_READ_BUFFER_SIZE = 1024
DEFAULT_TTL = 60
DEFAULT_MAX_MESSAGE_SIZE = 2**20


class HandshakeConfig(BaseModel):
    """Tunables shared by all transports.

    Attributes:
        read_buffer_size: Size of the single read on the plain TCP path.
        default_ttl: IP time-to-live used when no timeout is supplied.
        ca_file: PEM bundle for the TLS trust store. None uses the default
            public root CAs.
        max_message_size: Largest WebSocket message accepted, in bytes.
        log_level: Log level used by the command line.
    """

    read_buffer_size: int = Field(
        default=DEFAULT_READ_BUFFER_SIZE, gt=0, description="Plain TCP read size in bytes"
    )
    default_ttl: int = Field(default=DEFAULT_TTL, ge=1, le=255, description="Default IP TTL")
    ca_file: Optional[str] = Field(None, description="Path to a CA bundle in PEM format")
    max_message_size: int = Field(
        default=DEFAULT_MAX_MESSAGE_SIZE, gt=0, description="WebSocket max message size"
    )
    log_level: str = Field(default="INFO", description="Command line log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("ca_file")
    @classmethod
    def validate_ca_file(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not os.path.isfile(v):
            raise ValueError(f"CA file not found: {v}")
        return v

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HandshakeConfig":
        """Build a config from ``NODESHAKE_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        overrides = {}
        for name in cls.model_fields:
            value = env.get(f"{ENV_PREFIX}{name.upper()}")
            if value is not None and value != "":
                overrides[name] = value
        try:
            return cls(**overrides)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}* setting: {exc}") from exc


__all__ = [
    "ENV_PREFIX",
    "HandshakeConfig",
]
