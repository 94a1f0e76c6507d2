"""Convenience wrapper binding a transport and a proxy location.

Example:
    >>> from kafka_proxy import ProxyClient, OffsetReset, ProducerMessage, ProducerRecord
    >>> client = ProxyClient("http://localhost:8082", format="json")
    >>> client.produce("events", ProducerMessage(records=[ProducerRecord(value={"a": 1})]))
    >>> endpoint = client.create_consumer("my-group", client.consumer_request(OffsetReset.OLDEST))
    >>> messages = client.wait_for(endpoint, "events", count=1, timeout=30)
    >>> client.delete_consumer(endpoint)
"""

from __future__ import annotations

from typing import List, Optional, Union

from . import consumer, polling, producer
from .config import ProxyConfig
from .models import (
    ConsumerEndpoint,
    ConsumerRequest,
    Format,
    Message,
    OffsetReset,
    ProducerMessage,
    ProducerResponse,
)
from .transport import RequestsTransport, Transport


class ProxyClient:
    """Client for a single REST proxy.

    Attributes:
        base_url: Proxy location, e.g. http://localhost:8082
        transport: Transport used for every request
        format: Format used when a call does not pass one
        poll_interval: Seconds between fetches in wait_for
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[Transport] = None,
        format: Union[Format, str] = Format.AVRO,
        poll_interval: float = polling.DEFAULT_POLL_INTERVAL,
    ):
        self.base_url = base_url
        self.transport = transport or RequestsTransport()
        self.format = Format.parse(format)
        self.poll_interval = poll_interval

    @staticmethod
    def from_config(
        config: ProxyConfig, transport: Optional[Transport] = None
    ) -> "ProxyClient":
        return ProxyClient(
            config.base_url,
            transport=transport or RequestsTransport(timeout=config.request_timeout),
            format=config.format,
            poll_interval=config.poll_interval,
        )

    def _format(self, format: Union[Format, str, None]) -> Format:
        return self.format if format is None else Format.parse(format)

    def produce(
        self,
        topic: str,
        message: ProducerMessage,
        format: Union[Format, str, None] = None,
    ) -> ProducerResponse:
        return producer.produce(
            self.transport, self.base_url, topic, message, self._format(format)
        )

    def consume(
        self,
        topic: str,
        partition: int,
        offset: int,
        count: int = 1,
        format: Union[Format, str, None] = None,
    ) -> List[Message]:
        return consumer.consume(
            self.transport,
            self.base_url,
            topic,
            partition,
            offset,
            count,
            self._format(format),
        )

    def consumer_request(
        self, offset: OffsetReset, format: Union[Format, str, None] = None
    ) -> ConsumerRequest:
        return consumer.new_consumer_request(self._format(format), offset)

    def create_consumer(
        self, group: str, request: ConsumerRequest
    ) -> ConsumerEndpoint:
        return consumer.create_consumer(self.transport, self.base_url, group, request)

    def consume_endpoint(
        self,
        endpoint: ConsumerEndpoint,
        topic: str,
        format: Union[Format, str, None] = None,
    ) -> List[Message]:
        return consumer.consume_endpoint(
            self.transport, endpoint, topic, self._format(format)
        )

    def delete_consumer(self, endpoint: ConsumerEndpoint) -> None:
        consumer.delete_consumer(self.transport, endpoint)

    def wait_for(
        self,
        endpoint: ConsumerEndpoint,
        topic: str,
        count: int,
        timeout: float,
        format: Union[Format, str, None] = None,
    ) -> List[Message]:
        return polling.wait_for(
            self.transport,
            endpoint,
            topic,
            self._format(format),
            count,
            timeout,
            poll_interval=self.poll_interval,
        )

    def close(self) -> None:
        self.transport.close()
