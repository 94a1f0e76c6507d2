"""Direct partition reads and the consumer instance lifecycle.

A consumer instance lives on the proxy: `create_consumer` returns its
ConsumerEndpoint, `consume_endpoint` fetches the next batch from it and
`delete_consumer` removes it. Every call is a single round trip and nothing
is retried. Fetches must use the format the consumer was created with; that
is left to the proxy to enforce.
"""

from __future__ import annotations

from typing import List, Union

from .builders import (
    consume_endpoint_request,
    consume_request,
    create_consumer_request,
    delete_consumer_request,
)
from .decoders import (
    HTTP_NO_CONTENT,
    check_status,
    decode_consumer_endpoint,
    decode_messages,
)
from .models import (
    ConsumerEndpoint,
    ConsumerRequest,
    Format,
    Message,
    OffsetReset,
)
from .observability import logger, metrics
from .transport import Transport, execute


def consume(
    transport: Transport,
    base_url: str,
    topic: str,
    partition: int,
    offset: int,
    count: int,
    format: Union[Format, str],
) -> List[Message]:
    """Read up to `count` messages from `partition` starting at `offset`.

    The proxy may return fewer messages than requested.
    """
    req = consume_request(base_url, topic, partition, offset, count, format)
    messages = decode_messages(execute(transport, req))
    metrics.inc("messages_consumed", len(messages))
    return messages


def new_consumer_request(
    format: Union[Format, str], offset: OffsetReset
) -> ConsumerRequest:
    return ConsumerRequest(
        format=Format.parse(format), offset_reset=offset, auto_commit="true"
    )


def create_consumer(
    transport: Transport, base_url: str, group: str, request: ConsumerRequest
) -> ConsumerEndpoint:
    req = create_consumer_request(base_url, group, request)
    endpoint = decode_consumer_endpoint(execute(transport, req))
    logger.info(
        "consumer_created",
        group=group,
        instance_id=endpoint.instance_id,
        base_uri=endpoint.base_uri,
    )
    return endpoint


def consume_endpoint(
    transport: Transport,
    endpoint: ConsumerEndpoint,
    topic: str,
    format: Union[Format, str],
) -> List[Message]:
    """Fetch the next batch of messages for `topic` from a consumer instance."""
    req = consume_endpoint_request(endpoint, topic, format)
    messages = decode_messages(execute(transport, req))
    metrics.inc("messages_consumed", len(messages))
    return messages


def delete_consumer(transport: Transport, endpoint: ConsumerEndpoint) -> None:
    """Delete a consumer instance. Only 204 No Content counts as success."""
    resp = execute(transport, delete_consumer_request(endpoint))
    check_status(resp, HTTP_NO_CONTENT)
    logger.info(
        "consumer_deleted",
        instance_id=endpoint.instance_id,
        base_uri=endpoint.base_uri,
    )
