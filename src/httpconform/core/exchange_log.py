"""
=============================================================================
EXCHANGE LOGGING
=============================================================================

One structured log record per request/response exchange, emitted on the
"httpconform.exchange" logger:

    text:  a1b2c3d4 GET / example.com:80 -> 200 (13 bytes) 41.07ms ok
    json:  {"exchange_id": "a1b2c3d4", "method": "GET", ...}

Route it separately from diagnostics if needed:

    logging.getLogger("httpconform.exchange").addHandler(file_handler)

=============================================================================
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger("httpconform.exchange")


@dataclass
class ExchangeLog:
    """
    Structured record of one exchange.

    outcome is "ok", "rejected" (grammar failure) or the name of the
    session-level error class (e.g. "ConnectionLost").
    """

    exchange_id: str
    method: str
    target: str
    host: str
    status_code: Optional[int]
    body_length: Optional[int]
    duration_ms: float
    outcome: str
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "exchange_id": self.exchange_id,
            "method": self.method,
            "target": self.target,
            "host": self.host,
            "status_code": self.status_code,
            "body_length": self.body_length,
            "duration_ms": round(self.duration_ms, 2),
            "outcome": self.outcome,
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        status = self.status_code if self.status_code is not None else "-"
        body = f"{self.body_length} bytes" if self.body_length is not None else "no body"
        return (
            f"{self.exchange_id} {self.method} {self.target} {self.host} "
            f"-> {status} ({body}) {self.duration_ms:.2f}ms {self.outcome}"
        )


def log_exchange(entry: ExchangeLog, log_format: str = "text", level: int = logging.INFO) -> None:
    """Emit an exchange record as text or JSON."""
    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())
