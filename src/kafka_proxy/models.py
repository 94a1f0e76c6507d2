"""Wire models for the REST proxy.

Keys and values are opaque: whatever JSON the proxy hands back (a base64
string for binary, an arbitrary JSON document for json and avro) is passed
through untouched.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import RequestValidationError

CONSUMER_CONTENT_TYPE = "application/vnd.kafka.v1+json"


class Format(str, Enum):
    JSON = "json"
    BINARY = "binary"
    AVRO = "avro"

    @classmethod
    def parse(cls, value: Union["Format", str]) -> "Format":
        try:
            return cls(value)
        except ValueError as e:
            raise RequestValidationError(f"Unknown format: {value}") from e

    @property
    def content_type(self) -> str:
        return f"application/vnd.kafka.{self.value}.v1+json"


class OffsetReset(str, Enum):
    """Where a new consumer starts when the group has no committed offset."""

    OLDEST = "smallest"
    NEWEST = "largest"


def content_type_for_format(format: Union[Format, str]) -> str:
    return Format.parse(format).content_type


class Message(BaseModel):
    """A single record fetched from a topic partition."""

    model_config = ConfigDict(frozen=True)

    key: Any = None
    value: Any
    partition: int = Field(ge=0)
    offset: int


class ConsumerRequest(BaseModel):
    """Creation parameters for a consumer instance on the proxy."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    format: Format
    offset_reset: OffsetReset = Field(alias="auto.offset.reset")
    auto_commit: str = Field(default="true", alias="auto.commit.enable")
    name: Optional[str] = None

    @field_validator("auto_commit", mode="before")
    @classmethod
    def _commit_flag(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return "true" if v else "false"
        return v

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ConsumerEndpoint(BaseModel):
    """Handle returned by the proxy for a created consumer.

    `base_uri` is the only location at which the consumer may be fetched from
    or deleted. Nothing deletes it on the caller's behalf.
    """

    model_config = ConfigDict(frozen=True)

    instance_id: str
    base_uri: str


class ProducerRecord(BaseModel):
    key: Any = None
    value: Any
    partition: Optional[int] = None

    def to_wire(self) -> Dict[str, Any]:
        # value is always sent, null included; key and partition only when set
        data = self.model_dump(mode="json")
        return {k: v for k, v in data.items() if k == "value" or v is not None}


class ProducerMessage(BaseModel):
    """Body of a produce call.

    Avro messages need either `value_schema` (inline definition) or
    `value_schema_id` (returned by an earlier produce call).
    """

    key_schema: Optional[str] = None
    key_schema_id: Optional[int] = None
    value_schema: Optional[str] = None
    value_schema_id: Optional[int] = None
    records: List[ProducerRecord] = Field(default_factory=list)

    def has_value_schema(self) -> bool:
        return bool(self.value_schema) or bool(self.value_schema_id)

    def to_wire(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json", exclude_none=True, exclude={"records"})
        data["records"] = [r.to_wire() for r in self.records]
        return data


class ProducerOffsets(BaseModel):
    partition: Optional[int] = None
    offset: Optional[int] = None
    error_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.error_code


class ProducerResponse(BaseModel):
    key_schema_id: Optional[int] = None
    value_schema_id: Optional[int] = None
    offsets: List[ProducerOffsets] = Field(default_factory=list)
