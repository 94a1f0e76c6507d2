"""Produce records to a topic through the proxy."""

from __future__ import annotations

from typing import Union

from .builders import produce_request
from .decoders import decode_producer_response
from .errors import RequestValidationError
from .models import Format, ProducerMessage, ProducerResponse
from .observability import logger, metrics
from .transport import Transport, execute


def produce(
    transport: Transport,
    base_url: str,
    topic: str,
    message: ProducerMessage,
    format: Union[Format, str],
) -> ProducerResponse:
    """Publish `message` to `topic` and return the per-record offsets.

    Avro messages must carry `value_schema` or `value_schema_id`; this is
    checked before any request is made. A record-level failure is reported in
    the matching ProducerOffsets entry and does not raise.

    Raises:
        RequestValidationError: missing avro schema or unknown format
        TransportError: the request could not be completed
        StatusError: the proxy answered with anything other than 200
        DecodeError: the 200 body was not a producer response
    """
    fmt = Format.parse(format)
    if fmt is Format.AVRO and not message.has_value_schema():
        raise RequestValidationError("Must provide a value schema or value schema id")

    req = produce_request(base_url, topic, fmt, message)
    resp = decode_producer_response(execute(transport, req))

    failed = sum(1 for o in resp.offsets if not o.ok)
    metrics.inc("messages_produced", len(resp.offsets) - failed)
    logger.info(
        "produce_completed",
        topic=topic,
        records=len(message.records),
        failed=failed,
        value_schema_id=resp.value_schema_id,
    )
    return resp
