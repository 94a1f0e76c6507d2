"""Tests for wait_for, driven by a fake clock patched over polling.time."""

from __future__ import annotations

import json

import pytest

from kafka_proxy.errors import StatusError, TransportError, WaitTimeoutError
from kafka_proxy.models import ConsumerEndpoint
from kafka_proxy.polling import wait_for
from kafka_proxy.transport import HTTPResponse

ENDPOINT = ConsumerEndpoint(
    instance_id="c1", base_uri="http://proxy/consumers/grp/instances/c1"
)


class Batches:
    """Fetch handler returning batches of the given sizes, then empty ones."""

    def __init__(self, *sizes, clock=None, fetch_seconds=0.0):
        self.sizes = list(sizes)
        self.calls = 0
        self.next_offset = 0
        self.clock = clock
        self.fetch_seconds = fetch_seconds

    def __call__(self, request):
        self.calls += 1
        if self.clock is not None:
            self.clock.advance(self.fetch_seconds)
        size = self.sizes.pop(0) if self.sizes else 0
        batch = [
            {"key": None, "value": {"n": i}, "partition": 0, "offset": i}
            for i in range(self.next_offset, self.next_offset + size)
        ]
        self.next_offset += size
        return HTTPResponse(status_code=200, body=json.dumps(batch).encode("utf-8"))


def test_accumulates_until_target(transport, clock):
    fetch = Batches(2, 0, 3)
    transport.handler = fetch

    msgs = wait_for(transport, ENDPOINT, "foo", "json", 5, timeout=30)

    assert [m.offset for m in msgs] == [0, 1, 2, 3, 4]
    assert fetch.calls == 3
    assert clock.sleeps == [0.5, 0.5]


def test_first_fetch_is_immediate(transport, clock):
    transport.handler = Batches(4)
    msgs = wait_for(transport, ENDPOINT, "foo", "json", 2, timeout=30)
    assert len(msgs) == 4
    assert clock.sleeps == []
    assert len(transport.requests) == 1


def test_result_is_not_truncated(transport, clock):
    transport.handler = Batches(3, 4)
    msgs = wait_for(transport, ENDPOINT, "foo", "json", 5, timeout=30)
    assert len(msgs) == 7
    assert [m.offset for m in msgs] == list(range(7))


def test_timeout_with_no_messages(transport, clock):
    fetch = Batches()
    transport.handler = fetch

    with pytest.raises(WaitTimeoutError) as ei:
        wait_for(transport, ENDPOINT, "foo", "json", 1, timeout=0.5, poll_interval=0.5)

    assert ei.value.received == 0
    assert ei.value.messages == []
    assert str(ei.value) == "Timed out: 0"
    assert 1 <= fetch.calls <= 2


def test_fetch_count_is_bounded_by_timeout_over_interval(transport, clock):
    fetch = Batches()
    transport.handler = fetch

    with pytest.raises(WaitTimeoutError):
        wait_for(transport, ENDPOINT, "foo", "json", 1, timeout=2.0, poll_interval=0.5)

    assert abs(fetch.calls - 4) <= 1
    assert clock.now == pytest.approx(2.0)


def test_deadline_during_wait_stops_further_fetches(transport, clock):
    fetch = Batches()
    transport.handler = fetch

    with pytest.raises(WaitTimeoutError):
        wait_for(transport, ENDPOINT, "foo", "json", 1, timeout=0.75, poll_interval=0.5)

    # the second wait is cut to the remaining 0.25s and no third fetch is issued
    assert clock.sleeps == [0.5, 0.25]
    assert fetch.calls == 2


def test_timeout_reports_partial_progress(transport, clock):
    transport.handler = Batches(1, 1)

    with pytest.raises(WaitTimeoutError) as ei:
        wait_for(transport, ENDPOINT, "foo", "json", 10, timeout=1.0, poll_interval=0.5)

    assert ei.value.received == 2
    assert [m.offset for m in ei.value.messages] == [0, 1]


def test_slow_fetch_still_counts_against_deadline(transport, clock):
    fetch = Batches(1, clock=clock, fetch_seconds=3.0)
    transport.handler = fetch

    with pytest.raises(WaitTimeoutError) as ei:
        wait_for(transport, ENDPOINT, "foo", "json", 2, timeout=1.0)

    # the in-flight fetch completes, but nothing new starts after the deadline
    assert fetch.calls == 1
    assert ei.value.received == 1
    assert clock.sleeps == []


def test_fetch_error_aborts_without_retry(transport, clock):
    transport.handler = Batches()
    transport.queue(
        Batches(1),
        HTTPResponse(status_code=404, body=b'{"error_code":40403}'),
        Batches(5),
    )

    with pytest.raises(StatusError) as ei:
        wait_for(transport, ENDPOINT, "foo", "json", 5, timeout=30)

    assert ei.value.status_code == 404
    assert len(transport.requests) == 2


def test_first_fetch_error_raised_before_any_wait(transport, clock):
    transport.queue(TransportError("connection refused"))
    with pytest.raises(TransportError):
        wait_for(transport, ENDPOINT, "foo", "json", 1, timeout=30)
    assert clock.sleeps == []


def test_uses_endpoint_and_format_for_every_fetch(transport, clock):
    transport.handler = Batches(1, 1)
    wait_for(transport, ENDPOINT, "foo", "avro", 2, timeout=30)
    assert {r.url for r in transport.requests} == {
        "http://proxy/consumers/grp/instances/c1/topics/foo"
    }
    assert {r.headers["Accept"] for r in transport.requests} == {
        "application/vnd.kafka.avro.v1+json"
    }
