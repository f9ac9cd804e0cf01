"""
=============================================================================
CLIENT CONFIGURATION
=============================================================================

All tunables of the conformance client in one dataclass.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

Precedence, highest first:

    1. Command-line flags     (httpconform --timeout 5 ...)
    2. Environment variables  (HTTPCONFORM_TIMEOUT=5)
    3. Defaults below

    # From shell:
    HTTPCONFORM_LOG_LEVEL=DEBUG python -m httpconform http://localhost:8080/

    # In code:
    config = ClientConfig.from_env()
    config.validate()
    client = HttpClient(config)

=============================================================================
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from . import __version__
from .http.parser import DEFAULT_MAX_BODY_SIZE, MAX_CONTENT_LENGTH


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """
    Configuration for the conformance client.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - timeout, buffer_size, verify_tls

    PARSER LIMITS
    - max_line_length, max_body_size

    IDENTITY
    - user_agent

    OUTPUT
    - log_level, log_format, color

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    timeout: Optional[float] = 30.0
    """
    Socket timeout in seconds, for connect and for every recv.
    None = blocking (a silent server hangs the test run forever).
    """

    buffer_size: int = 8192
    """Bytes requested per recv() call."""

    verify_tls: bool = True
    """
    Verify the server certificate and host name for https URLs.
    Turn off (--insecure) for self-signed test servers.
    """

    # ─────────────────────────────────────────────────────────────────────
    # PARSER LIMITS
    # ─────────────────────────────────────────────────────────────────────

    max_line_length: int = 8192
    """
    Longest status line, header line or chunk-size line accepted.
    A server that never sends CRLF would otherwise fill memory.
    """

    max_body_size: int = DEFAULT_MAX_BODY_SIZE
    """
    Largest body (Content-Length or chunked total) that will be read.
    Never above 2**32 - 1, the Content-Length range.
    """

    # ─────────────────────────────────────────────────────────────────────
    # IDENTITY
    # ─────────────────────────────────────────────────────────────────────

    user_agent: str = field(default_factory=lambda: f"httpconform/{__version__}")
    """Value of the User-Agent request header."""

    # ─────────────────────────────────────────────────────────────────────
    # OUTPUT
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """
    Exchange log format: 'json' or 'text'.
    JSON is better for log aggregators, text for humans.
    """

    color: bool = True
    """Colorize pass/fail lines with ANSI escapes."""

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTPCONFORM_TIMEOUT        Socket timeout in seconds (default: 30)
        HTTPCONFORM_MAX_BODY_SIZE  Body limit in bytes (default: 64 MB)
        HTTPCONFORM_VERIFY_TLS     Verify certificates (default: true)
        HTTPCONFORM_LOG_LEVEL      Logging level (default: INFO)
        HTTPCONFORM_LOG_FORMAT     text or json (default: text)
        HTTPCONFORM_COLOR          ANSI colors (default: true)

        =====================================================================
        """
        return cls(
            timeout=float(os.getenv("HTTPCONFORM_TIMEOUT", "30")),
            max_body_size=int(os.getenv("HTTPCONFORM_MAX_BODY_SIZE", str(DEFAULT_MAX_BODY_SIZE))),
            verify_tls=_env_bool("HTTPCONFORM_VERIFY_TLS", True),
            log_level=os.getenv("HTTPCONFORM_LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("HTTPCONFORM_LOG_FORMAT", "text").lower(),
            color=_env_bool("HTTPCONFORM_COLOR", True),
        )

    def validate(self) -> None:
        """Fail fast on values that would break the first exchange."""
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.buffer_size < 1:
            raise ValueError("buffer_size must be >= 1")

        if self.max_line_length < 1:
            raise ValueError("max_line_length must be >= 1")

        if not 0 <= self.max_body_size <= MAX_CONTENT_LENGTH:
            raise ValueError(f"max_body_size must be between 0 and {MAX_CONTENT_LENGTH}")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}. Must be one of {', '.join(LOG_LEVELS)}.")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'.")


def setup_logging(config: ClientConfig) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logging.getLogger("httpconform").setLevel(level)
