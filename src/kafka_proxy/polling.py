"""Bounded polling of a consumer instance."""

from __future__ import annotations

import time
from typing import List, Union

from .consumer import consume_endpoint
from .errors import WaitTimeoutError
from .models import ConsumerEndpoint, Format, Message
from .observability import logger, metrics
from .transport import Transport

DEFAULT_POLL_INTERVAL = 0.5


def wait_for(
    transport: Transport,
    endpoint: ConsumerEndpoint,
    topic: str,
    format: Union[Format, str],
    count: int,
    timeout: float,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> List[Message]:
    """Fetch from `endpoint` until at least `count` messages have arrived.

    The first fetch happens immediately, then one fetch per `poll_interval`
    seconds. Batches are accumulated in arrival order and returned as-is once
    the target is met, so the result may hold more than `count` messages.

    `timeout` is a wall-clock budget for the whole call. Once it is used up no
    further fetch is started and WaitTimeoutError is raised with whatever was
    accumulated. A fetch that is already running is allowed to finish.

    Fetch errors propagate immediately; they are neither retried nor treated
    as an empty batch.
    """
    deadline = time.monotonic() + timeout
    polls = 1
    messages = list(consume_endpoint(transport, endpoint, topic, format))

    while len(messages) < count:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise _timeout(endpoint, topic, count, polls, messages)
        time.sleep(min(poll_interval, remaining))
        if deadline - time.monotonic() <= 0:
            raise _timeout(endpoint, topic, count, polls, messages)

        polls += 1
        messages.extend(consume_endpoint(transport, endpoint, topic, format))

    metrics.inc("consumer_polls", polls)
    logger.info(
        "wait_completed",
        instance_id=endpoint.instance_id,
        topic=topic,
        target=count,
        received=len(messages),
        polls=polls,
    )
    return messages


def _timeout(
    endpoint: ConsumerEndpoint,
    topic: str,
    count: int,
    polls: int,
    messages: List[Message],
) -> WaitTimeoutError:
    metrics.inc("consumer_polls", polls)
    metrics.inc("consumer_wait_timeouts")
    logger.info(
        "wait_timed_out",
        instance_id=endpoint.instance_id,
        topic=topic,
        target=count,
        received=len(messages),
        polls=polls,
    )
    return WaitTimeoutError(len(messages), messages)
