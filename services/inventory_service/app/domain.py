"""Order payloads as seen by the inventory consumer.

The sidecar may hand over event data as raw JSON bytes, as a JSON string or
as an already-parsed mapping, depending on content negotiation upstream.
decode_order accepts any of them and always yields the same Order.
"""

import base64
import json
from collections.abc import Mapping
from functools import singledispatch
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class PayloadDecodeError(ValueError):
    pass


class Order(BaseModel):
    model_config = ConfigDict(populate_by_name=True, strict=True, frozen=True)

    order_id: str = Field(default="", alias="orderId")
    amount: int = 0

    @property
    def is_valid(self) -> bool:
        return bool(self.order_id) and self.amount > 0


@singledispatch
def decode_order(data: Any) -> Order:
    raise PayloadDecodeError(f"unexpected data type {type(data).__name__}")


@decode_order.register
def _(data: Mapping) -> Order:
    try:
        return Order.model_validate(dict(data))
    except ValidationError as e:
        raise PayloadDecodeError(f"invalid order payload: {e.errors()}") from e


@decode_order.register(bytes)
@decode_order.register(bytearray)
def _(data) -> Order:
    try:
        parsed = json.loads(data)
    except ValueError as e:
        raise PayloadDecodeError(f"payload is not JSON: {e}") from e
    if not isinstance(parsed, Mapping):
        raise PayloadDecodeError(f"expected a JSON object, got {type(parsed).__name__}")
    return decode_order(parsed)


@decode_order.register
def _(data: str) -> Order:
    return decode_order(data.encode("utf-8"))


def event_data(envelope: Mapping) -> Any:
    """Pull the payload out of a delivered CloudEvent.

    Binary payloads arrive base64 encoded under data_base64. Raw-payload
    subscriptions deliver the message without any envelope at all.
    """
    if "data_base64" in envelope:
        try:
            return base64.b64decode(envelope["data_base64"], validate=True)
        except (ValueError, TypeError) as e:
            raise PayloadDecodeError(f"invalid data_base64: {e}") from e
    if "data" in envelope:
        return envelope["data"]
    if "specversion" not in envelope:
        return envelope
    raise PayloadDecodeError("cloud event carries no data")
