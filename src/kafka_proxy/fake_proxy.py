"""In-memory stand-in for a Kafka REST proxy.

`create_app()` returns a FastAPI app serving the same routes the client uses,
backed by plain Python lists. It is meant for demos and end-to-end tests:

    from fastapi.testclient import TestClient
    from kafka_proxy import HTTPXTransport, ProxyClient
    from kafka_proxy.fake_proxy import create_app

    client = ProxyClient("http://testserver", HTTPXTransport(TestClient(create_app())))

No durability, no replication, no offset commits.
"""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, Header, HTTPException, Request, Response

from .models import (
    CONSUMER_CONTENT_TYPE,
    ConsumerRequest,
    Format,
    OffsetReset,
    ProducerMessage,
)


def _format_from_media_type(value: Optional[str]) -> Optional[Format]:
    media = (value or "").split(";", 1)[0].strip()
    for f in Format:
        if media == f.content_type:
            return f
    return None


@dataclass
class _Instance:
    group: str
    instance_id: str
    request: ConsumerRequest
    # (topic, partition) -> next offset to hand out
    positions: Dict[Tuple[str, int], int] = field(default_factory=dict)


@dataclass
class ProxyState:
    partitions: int = 1
    max_batch: Optional[int] = None
    topics: Dict[str, List[List[Dict[str, Any]]]] = field(default_factory=dict)
    schemas: Dict[str, int] = field(default_factory=dict)
    consumers: Dict[Tuple[str, str], _Instance] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def register_schema(self, schema: str) -> int:
        if schema not in self.schemas:
            self.schemas[schema] = len(self.schemas) + 1
        return self.schemas[schema]

    def topic(self, name: str) -> List[List[Dict[str, Any]]]:
        log = self.topics.get(name)
        if log is None:
            raise HTTPException(status_code=404, detail=f"Topic {name} not found")
        return log

    def instance(self, group: str, instance_id: str) -> _Instance:
        inst = self.consumers.get((group, instance_id))
        if inst is None:
            raise HTTPException(
                status_code=404, detail=f"Consumer instance {instance_id} not found"
            )
        return inst


def _message(record: Dict[str, Any], partition: int, offset: int) -> Dict[str, Any]:
    return {
        "key": record["key"],
        "value": record["value"],
        "partition": partition,
        "offset": offset,
    }


def _schema_id(
    state: ProxyState, schema: Optional[str], schema_id: Optional[int]
) -> Optional[int]:
    if schema:
        return state.register_schema(schema)
    return schema_id or None


def create_app(partitions: int = 1, max_batch: Optional[int] = None) -> FastAPI:
    """Build an in-memory proxy.

    Args:
        partitions: Partitions created for each new topic
        max_batch: Most messages a consumer instance fetch returns (None = all)
    """
    state = ProxyState(partitions=partitions, max_batch=max_batch)
    app = FastAPI(title="Fake Kafka REST Proxy", version="0.1.0")
    app.state.proxy = state

    @app.post("/topics/{topic}")
    def produce(
        topic: str,
        message: ProducerMessage,
        content_type: Optional[str] = Header(None),
    ):
        fmt = _format_from_media_type(content_type)
        if fmt is None:
            raise HTTPException(
                status_code=415, detail=f"Unsupported content type {content_type}"
            )
        if fmt is Format.AVRO and not message.has_value_schema():
            raise HTTPException(
                status_code=422,
                detail="Request includes neither value schema nor value schema id",
            )

        with state._lock:
            key_schema_id = value_schema_id = None
            if fmt is Format.AVRO:
                key_schema_id = _schema_id(
                    state, message.key_schema, message.key_schema_id
                )
                value_schema_id = _schema_id(
                    state, message.value_schema, message.value_schema_id
                )

            log = state.topics.setdefault(
                topic, [[] for _ in range(state.partitions)]
            )
            offsets = []
            for record in message.records:
                p = 0 if record.partition is None else record.partition
                if p < 0 or p >= len(log):
                    offsets.append(
                        {
                            "partition": p,
                            "offset": None,
                            "error_code": 40402,
                            "error": f"Partition {p} not found",
                        }
                    )
                    continue
                log[p].append({"key": record.key, "value": record.value})
                offsets.append(
                    {
                        "partition": p,
                        "offset": len(log[p]) - 1,
                        "error_code": None,
                        "error": None,
                    }
                )

        return {
            "key_schema_id": key_schema_id,
            "value_schema_id": value_schema_id,
            "offsets": offsets,
        }

    @app.get("/topics/{topic}/partitions/{partition}/messages")
    def consume(
        topic: str,
        partition: int,
        offset: int,
        count: int = 1,
        accept: Optional[str] = Header(None),
    ):
        if _format_from_media_type(accept) is None:
            raise HTTPException(status_code=406, detail=f"Not acceptable {accept}")
        with state._lock:
            log = state.topic(topic)
            if partition < 0 or partition >= len(log):
                raise HTTPException(
                    status_code=404, detail=f"Partition {partition} not found"
                )
            records = log[partition][offset : offset + count]
        return [_message(r, partition, i) for i, r in enumerate(records, start=offset)]

    @app.post("/consumers/{group}")
    def create_consumer(
        group: str,
        req: ConsumerRequest,
        request: Request,
        content_type: Optional[str] = Header(None),
    ):
        if (content_type or "").split(";", 1)[0].strip() != CONSUMER_CONTENT_TYPE:
            raise HTTPException(
                status_code=415, detail=f"Unsupported content type {content_type}"
            )
        instance_id = req.name or uuid.uuid4().hex
        with state._lock:
            if (group, instance_id) in state.consumers:
                raise HTTPException(
                    status_code=409,
                    detail=f"Consumer instance {instance_id} already exists",
                )
            state.consumers[(group, instance_id)] = _Instance(
                group=group, instance_id=instance_id, request=req
            )
        base_uri = f"{request.base_url}consumers/{group}/instances/{instance_id}"
        return {"instance_id": instance_id, "base_uri": base_uri}

    @app.get("/consumers/{group}/instances/{instance_id}/topics/{topic}")
    def consume_instance(
        group: str,
        instance_id: str,
        topic: str,
        accept: Optional[str] = Header(None),
    ):
        with state._lock:
            inst = state.instance(group, instance_id)
            if _format_from_media_type(accept) is not inst.request.format:
                raise HTTPException(
                    status_code=406,
                    detail=(
                        f"Consumer format {inst.request.format.value} "
                        f"does not match {accept}"
                    ),
                )
            log = state.topic(topic)
            out: List[Dict[str, Any]] = []
            for p, records in enumerate(log):
                pos = inst.positions.get((topic, p))
                if pos is None:
                    oldest = inst.request.offset_reset is OffsetReset.OLDEST
                    pos = 0 if oldest else len(records)
                end = len(records)
                if state.max_batch is not None:
                    end = min(end, pos + state.max_batch - len(out))
                for i in range(pos, end):
                    out.append(_message(records[i], p, i))
                inst.positions[(topic, p)] = max(pos, end)
        return out

    @app.delete("/consumers/{group}/instances/{instance_id}", status_code=204)
    def delete_consumer(group: str, instance_id: str):
        with state._lock:
            state.instance(group, instance_id)
            del state.consumers[(group, instance_id)]
        return Response(status_code=204)

    return app
