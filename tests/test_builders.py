import json

import pytest

from kafka_proxy.builders import (
    build_url,
    consume_endpoint_request,
    consume_request,
    consume_url,
    create_consumer_request,
    delete_consumer_request,
    produce_request,
)
from kafka_proxy.errors import RequestValidationError
from kafka_proxy.models import (
    ConsumerEndpoint,
    ConsumerRequest,
    Format,
    OffsetReset,
    ProducerMessage,
    ProducerRecord,
)

ENDPOINT = ConsumerEndpoint(
    instance_id="c1", base_uri="http://proxy-2:8082/consumers/g/instances/c1"
)


@pytest.mark.parametrize(
    "base,path,expected",
    [
        ("http://proxy:8082", "topics/foo", "http://proxy:8082/topics/foo"),
        ("http://proxy:8082/", "topics/foo", "http://proxy:8082/topics/foo"),
        ("http://proxy/kafka/", "topics/foo", "http://proxy/kafka/topics/foo"),
        ("https://proxy/kafka", "/consumers/g", "https://proxy/kafka/consumers/g"),
    ],
)
def test_build_url_joins_paths(base, path, expected):
    assert build_url(base, path) == expected


def test_build_url_rejects_relative_base():
    with pytest.raises(RequestValidationError):
        build_url("not a url", "topics/foo")


def test_consume_request():
    req = consume_request("http://proxy:8082", "foo", 1, 6, 10, Format.AVRO)
    assert req.method == "GET"
    assert req.url == "http://proxy:8082/topics/foo/partitions/1/messages?offset=6&count=10"
    assert req.headers == {"Accept": "application/vnd.kafka.avro.v1+json"}
    assert req.body is None


def test_consume_url_does_not_validate_count():
    assert consume_url("http://proxy/", "foo", 2, 0, 0) == (
        "http://proxy/topics/foo/partitions/2/messages?offset=0&count=0"
    )


@pytest.mark.parametrize("count", [0, -1])
def test_consume_request_rejects_count_below_one(count):
    with pytest.raises(RequestValidationError, match="Count must be 1 or greater"):
        consume_request("http://proxy", "foo", 0, 0, count, "json")


def test_consume_request_rejects_unknown_format():
    with pytest.raises(RequestValidationError):
        consume_request("http://proxy", "foo", 0, 0, 1, "xml")


def test_produce_request_sends_tombstone_value_as_null():
    msg = ProducerMessage(records=[ProducerRecord(value=None)])
    req = produce_request("http://proxy", "t", "binary", msg)
    assert json.loads(req.body) == {"records": [{"value": None}]}


def test_produce_request():
    msg = ProducerMessage(value_schema="{}", records=[ProducerRecord(value={"a": 1})])
    req = produce_request("http://proxy", "foo", "avro", msg)
    assert req.method == "POST"
    assert req.url == "http://proxy/topics/foo"
    assert req.headers == {"Content-Type": "application/vnd.kafka.avro.v1+json"}
    assert json.loads(req.body) == {
        "value_schema": "{}",
        "records": [{"value": {"a": 1}}],
    }


def test_create_consumer_request():
    cr = ConsumerRequest(format="binary", offset_reset=OffsetReset.NEWEST)
    req = create_consumer_request("http://proxy", "grp", cr)
    assert req.method == "POST"
    assert req.url == "http://proxy/consumers/grp"
    assert req.headers == {"Content-Type": "application/vnd.kafka.v1+json"}
    assert json.loads(req.body) == {
        "format": "binary",
        "auto.offset.reset": "largest",
        "auto.commit.enable": "true",
    }


def test_consume_endpoint_request_uses_endpoint_base_uri():
    req = consume_endpoint_request(ENDPOINT, "foo", "json")
    assert req.method == "GET"
    assert req.url == "http://proxy-2:8082/consumers/g/instances/c1/topics/foo"
    assert req.headers == {"Accept": "application/vnd.kafka.json.v1+json"}


def test_delete_consumer_request():
    req = delete_consumer_request(ENDPOINT)
    assert req.method == "DELETE"
    assert req.url == ENDPOINT.base_uri
    assert req.body is None
