"""
=============================================================================
LOGGING
=============================================================================

Three loggers, all under the "httpresource" namespace:

    httpresource.dispatcher   state transitions and policy decisions (DEBUG)
    httpresource.access       one line per dispatched request
    httpresource.errors       unhandled handler faults (default observer)

=============================================================================
ACCESS LOG FORMATS
=============================================================================

    TEXT (default):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ a1b2c3d4 [10/Jun/2026:10:55:36 +0000] "GET /products/a" 200 1234 5.2ms│
    └─────────────────────────────────────────────────────────────────────┘

    JSON (for log aggregators):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"request_id": "a1b2c3d4", "method": "GET", "path": "/products/a",  │
    │  "resource": "Product", "status_code": 200, ...}                    │
    └─────────────────────────────────────────────────────────────────────┘

The request id also goes back to the client as X-Request-ID, so a report
from a user can be matched to its log line.

=============================================================================
"""

from dataclasses import asdict, dataclass
from typing import Optional
import json
import logging
import time

from .config import RouterConfig
from .http.status_codes import HTTPStatus


access_logger = logging.getLogger("httpresource.access")
error_logger = logging.getLogger("httpresource.errors")


@dataclass
class RequestLog:
    """
    Structured access log entry.

    method is the effective verb (after any override), resource the name
    of the matched Resource class or "-" when nothing matched.
    """

    request_id: str
    method: str
    path: str
    query: str
    resource: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        target = f"{self.path}?{self.query}" if self.query else self.path
        return (
            f'{self.request_id} [{self.timestamp}] '
            f'"{self.method} {target}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


def log_request(entry: RequestLog, log_format: str = "text") -> None:
    """Emit an access log line; 5xx at ERROR, everything else at INFO."""
    level = logging.ERROR if HTTPStatus(entry.status_code).is_server_error else logging.INFO
    if log_format == "json":
        access_logger.log(level, json.dumps(entry.to_dict()))
    else:
        access_logger.log(level, entry.to_text())


def timestamp() -> str:
    return time.strftime("%d/%b/%Y:%H:%M:%S %z")


def log_fault(fault: BaseException) -> None:
    """
    Default error observer: log the fault with its traceback.

    Never raises.
    """
    error_logger.error(
        "Unhandled %s: %s", type(fault).__name__, fault,
        exc_info=(type(fault), fault, fault.__traceback__),
    )


def configure_logging(config: Optional[RouterConfig] = None) -> None:
    """
    Configure logging from a RouterConfig.

    Sets up a root handler (when none exists yet) and the level of the
    "httpresource" logger tree.
    """
    config = config or RouterConfig()
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httpresource").setLevel(level)
