import json
import os
from importlib.resources import files

from jsonschema import validate as jsonschema_validate

from services.common.dapr_client import DaprClient

from .domain import Order

PUBSUB_NAME = os.getenv("PUBSUB_NAME", "pubsub")
ORDERS_TOPIC = os.getenv("ORDERS_TOPIC", "orders")

SCHEMA_PACKAGE = "services.orders_service.events"
SCHEMA_NAME = "order-created.schema.json"

_SCHEMA_CACHE = None


def _load_schema() -> dict:
    global _SCHEMA_CACHE
    if _SCHEMA_CACHE is None:
        schema = files(SCHEMA_PACKAGE).joinpath(SCHEMA_NAME)
        _SCHEMA_CACHE = json.loads(schema.read_text(encoding="utf-8"))
    return _SCHEMA_CACHE


def build_order_created_event(order: Order) -> dict:
    # The sidecar wraps this payload in a CloudEvent envelope on publish.
    event = order.to_dict()
    jsonschema_validate(instance=event, schema=_load_schema())
    return event


def publish_order_created(dapr: DaprClient, order: Order) -> None:
    dapr.publish_event(PUBSUB_NAME, ORDERS_TOPIC, build_order_created_event(order))
