"""Request builders for the proxy routes.

These are pure: they build an HTTPRequest and never touch the network.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union
from urllib.parse import quote, unquote, urlencode, urlsplit, urlunsplit

from .errors import RequestValidationError
from .models import (
    CONSUMER_CONTENT_TYPE,
    ConsumerEndpoint,
    ConsumerRequest,
    Format,
    ProducerMessage,
)
from .transport import HTTPRequest


def build_url(base_url: str, path: str, query: Optional[str] = None) -> str:
    """Join `path` onto the path of `base_url` and set the query string.

    Empty segments and duplicate slashes are dropped, so a trailing slash on
    the base URL makes no difference.
    """
    parts = urlsplit(base_url)
    if not parts.scheme or not parts.netloc:
        raise RequestValidationError(f"Invalid base url: {base_url!r}")
    segments = [
        s for s in unquote(parts.path).split("/") + path.split("/") if s and s != "."
    ]
    joined = "/" + "/".join(segments)
    return urlunsplit(
        (parts.scheme, parts.netloc, quote(joined, safe="/"), query or parts.query, "")
    )


def _get(base_url: str, path: str, accept: str, query: Optional[str] = None):
    return HTTPRequest(
        method="GET",
        url=build_url(base_url, path, query),
        headers={"Accept": accept},
    )


def _post(base_url: str, path: str, body: Dict[str, Any], content_type: str):
    return HTTPRequest(
        method="POST",
        url=build_url(base_url, path),
        headers={"Content-Type": content_type},
        body=json.dumps(body).encode("utf-8"),
    )


def consume_url(
    base_url: str, topic: str, partition: int, offset: int, count: int
) -> str:
    return build_url(
        base_url,
        f"topics/{topic}/partitions/{partition}/messages",
        urlencode([("offset", offset), ("count", count)]),
    )


def consume_request(
    base_url: str,
    topic: str,
    partition: int,
    offset: int,
    count: int,
    format: Union[Format, str],
) -> HTTPRequest:
    """GET topics/<topic>/partitions/<partition>/messages?offset=..&count=.."""
    if count < 1:
        raise RequestValidationError(f"Count must be 1 or greater: {count}")
    return HTTPRequest(
        method="GET",
        url=consume_url(base_url, topic, partition, offset, count),
        headers={"Accept": Format.parse(format).content_type},
    )


def produce_request(
    base_url: str, topic: str, format: Union[Format, str], message: ProducerMessage
) -> HTTPRequest:
    """POST topics/<topic>"""
    content_type = Format.parse(format).content_type
    return _post(base_url, f"topics/{topic}", message.to_wire(), content_type)


def create_consumer_request(
    base_url: str, group: str, request: ConsumerRequest
) -> HTTPRequest:
    """POST consumers/<group>"""
    return _post(
        base_url, f"consumers/{group}", request.to_wire(), CONSUMER_CONTENT_TYPE
    )


def consume_endpoint_request(
    endpoint: ConsumerEndpoint, topic: str, format: Union[Format, str]
) -> HTTPRequest:
    """GET <endpoint.base_uri>/topics/<topic>"""
    content_type = Format.parse(format).content_type
    return _get(endpoint.base_uri, f"topics/{topic}", content_type)


def delete_consumer_request(endpoint: ConsumerEndpoint) -> HTTPRequest:
    """DELETE <endpoint.base_uri>"""
    return HTTPRequest(method="DELETE", url=endpoint.base_uri)
