"""Response decoders.

Status is always checked before the body is parsed: a non-success response
raises StatusError with the raw body, a success response that does not parse
raises DecodeError.
"""

from __future__ import annotations

import json
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import DecodeError, StatusError
from .models import ConsumerEndpoint, Message, ProducerResponse
from .observability import metrics
from .transport import HTTPResponse

HTTP_OK = 200
HTTP_NO_CONTENT = 204

M = TypeVar("M", bound=BaseModel)

_messages_adapter = TypeAdapter(List[Message])


def check_status(response: HTTPResponse, expected: int = HTTP_OK) -> None:
    if response.status_code != expected:
        metrics.inc("proxy_status_errors")
        raise StatusError(response.status_code, response.body)


def _load(response: HTTPResponse) -> Any:
    try:
        return json.loads(response.body)
    except ValueError as e:
        raise DecodeError(response.status_code, response.body, str(e)) from e


def _decode_model(response: HTTPResponse, model: Type[M]) -> M:
    check_status(response)
    data = _load(response)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(response.status_code, response.body, str(e)) from e


def decode_messages(response: HTTPResponse) -> List[Message]:
    check_status(response)
    data = _load(response)
    try:
        return _messages_adapter.validate_python(data)
    except ValidationError as e:
        raise DecodeError(response.status_code, response.body, str(e)) from e


def decode_producer_response(response: HTTPResponse) -> ProducerResponse:
    return _decode_model(response, ProducerResponse)


def decode_consumer_endpoint(response: HTTPResponse) -> ConsumerEndpoint:
    return _decode_model(response, ConsumerEndpoint)
