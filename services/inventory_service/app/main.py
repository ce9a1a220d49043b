import json
import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Request

from services.common.dapr_client import DaprClient, DaprError
from services.common.dependencies import dapr_lifespan, get_dapr
from services.common.log_setup import configure_logging

from .handler import DeliveryResult, DeliveryStatus, handle_order_event

configure_logging()
logger = logging.getLogger(__name__)

PUBSUB_NAME = os.getenv("PUBSUB_NAME", "pubsub")
ORDERS_TOPIC = os.getenv("ORDERS_TOPIC", "orders")
ORDERS_ROUTE = "/orders"

app = FastAPI(title="inventory-service", lifespan=dapr_lifespan)


@app.get("/healthz")
def healthz(dapr: DaprClient = Depends(get_dapr)):
    try:
        dapr.get_metadata()
    except DaprError as e:
        logger.warning("Health check failed: %s", e)
        raise HTTPException(status_code=503, detail="dapr unavailable")
    return {"status": "ready"}


@app.get("/dapr/subscribe")
def subscriptions():
    return [{"pubsubname": PUBSUB_NAME, "topic": ORDERS_TOPIC, "route": ORDERS_ROUTE}]


@app.post(ORDERS_ROUTE)
async def on_order_created(request: Request):
    # Always 200: a non-2xx answer would make the sidecar redeliver.
    body = await request.body()
    try:
        envelope = json.loads(body)
    except ValueError:
        logger.error("error: order event body is not JSON, dropping")
        return _ack(DeliveryResult(DeliveryStatus.DROP))

    if not isinstance(envelope, dict):
        logger.error("error: order event body is not a JSON object, dropping")
        return _ack(DeliveryResult(DeliveryStatus.DROP))

    return _ack(handle_order_event(envelope))


def _ack(result: DeliveryResult) -> dict:
    return {"status": result.status.value}
