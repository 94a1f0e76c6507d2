"""Produce a few records and read them back through a consumer instance.

Runs against the in-memory proxy by default; pass a URL to use a real one:

    python examples/consumer_demo.py                 # in-memory
    python examples/consumer_demo.py http://localhost:8082
"""

from __future__ import annotations

import sys
from typing import List, Optional

from kafka_proxy import (
    Format,
    HTTPXTransport,
    Message,
    OffsetReset,
    ProducerMessage,
    ProducerRecord,
    ProxyClient,
)


def build_client(url: Optional[str] = None) -> ProxyClient:
    if url:
        return ProxyClient(url, format=Format.JSON)

    from fastapi.testclient import TestClient

    from kafka_proxy.fake_proxy import create_app

    transport = HTTPXTransport(client=TestClient(create_app(max_batch=2)))
    return ProxyClient("http://testserver", transport=transport, format=Format.JSON)


def run(client: ProxyClient, topic: str = "demo", count: int = 5) -> List[Message]:
    records = [ProducerRecord(value={"n": i}) for i in range(count)]
    client.produce(topic, ProducerMessage(records=records))

    endpoint = client.create_consumer(
        "demo-group", client.consumer_request(OffsetReset.OLDEST)
    )
    try:
        return client.wait_for(endpoint, topic, count=count, timeout=10)
    finally:
        client.delete_consumer(endpoint)


if __name__ == "__main__":
    client = build_client(sys.argv[1] if len(sys.argv) > 1 else None)
    for m in run(client):
        print(m.partition, m.offset, m.value)
    client.close()
