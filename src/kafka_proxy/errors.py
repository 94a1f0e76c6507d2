"""Exceptions raised by the proxy client.

Every error carries enough context (status, body, partial progress) to be
diagnosed without re-querying the proxy. Nothing in the library retries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .models import Message


class ProxyError(Exception):
    pass


class RequestValidationError(ProxyError, ValueError):
    """Caller arguments were rejected before anything was sent."""


class TransportError(ProxyError):
    """The request/response exchange itself failed."""


class StatusError(ProxyError):
    """The proxy answered with a status other than the expected one."""

    def __init__(self, status_code: int, body: bytes) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"{status_code}:{_text(body)}")


class DecodeError(ProxyError):
    """A success response whose body did not match the expected shape."""

    def __init__(self, status_code: int, body: bytes, reason: str) -> None:
        self.status_code = status_code
        self.body = body
        self.reason = reason
        super().__init__(f"{status_code}:{_text(body)}:{reason}")


class WaitTimeoutError(ProxyError):
    def __init__(
        self, received: int, messages: Optional[List["Message"]] = None
    ) -> None:
        self.received = received
        self.messages = list(messages or [])
        super().__init__(f"Timed out: {received}")


def _text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")
