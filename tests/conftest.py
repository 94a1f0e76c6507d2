from __future__ import annotations

import os
from typing import Callable, List, Optional, Union
from unittest.mock import patch

import pytest

from kafka_proxy.config import (
    TEST_TOPIC_ENV_VAR,
    TEST_URL_ENV_VAR,
    functional_test_required,
)
from kafka_proxy.transport import HTTPRequest, HTTPResponse, Transport

Reply = Union[HTTPResponse, Exception, Callable[[HTTPRequest], HTTPResponse]]


class FakeTransport(Transport):
    """Records every request and answers from a queue of canned replies.

    A reply can be an HTTPResponse, an exception to raise, or a callable
    taking the request. When the queue is empty `handler` is used.
    """

    def __init__(
        self, handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
    ):
        self.requests: List[HTTPRequest] = []
        self.replies: List[Reply] = []
        self.handler = handler
        self.closed = False

    def queue(self, *replies: Reply) -> "FakeTransport":
        self.replies.extend(replies)
        return self

    def send(self, request: HTTPRequest) -> HTTPResponse:
        self.requests.append(request)
        if self.replies:
            reply = self.replies.pop(0)
        elif self.handler is not None:
            reply = self.handler
        else:
            raise AssertionError(f"unexpected request {request.method} {request.url}")
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        return reply

    def close(self) -> None:
        self.closed = True


class FakeClock:
    """Stands in for the `time` module inside kafka_proxy.polling."""

    def __init__(self, now: float = 0.0):
        self.now = now
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def clock():
    c = FakeClock()
    with patch("kafka_proxy.polling.time", c):
        yield c


def pytest_addoption(parser):
    parser.addoption(
        "--short",
        action="store_true",
        default=False,
        help="skip functional tests against a real proxy",
    )


def _functional_setting(request, name: str) -> str:
    if request.config.getoption("--short"):
        pytest.skip(f"Skipping {name} tests in short mode")
    value = os.environ.get(name, "").strip()
    if not value:
        reason = f"{name} is undefined"
        if functional_test_required():
            pytest.fail(reason)
        pytest.skip(reason)
    return value


@pytest.fixture
def functional_url(request) -> str:
    return _functional_setting(request, TEST_URL_ENV_VAR)


@pytest.fixture
def functional_topic(request) -> str:
    return _functional_setting(request, TEST_TOPIC_ENV_VAR)
