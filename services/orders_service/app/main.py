import logging

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field

from services.common.dapr_client import DaprClient, DaprError
from services.common.dependencies import dapr_lifespan, get_dapr
from services.common.log_setup import configure_logging

from .domain import CorruptRecord, OrderValidationError, create_order
from .errors import DependencyUnavailable, InvalidPayload, MissingIdentifier, NotFound
from .intake import PersistenceError, accept_order, load_order

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="orders-service", lifespan=dapr_lifespan)


class CreateOrderRequest(BaseModel):
    # Missing fields fall through to domain validation, wrong JSON types do not.
    model_config = ConfigDict(populate_by_name=True, strict=True)

    order_id: str = Field(default="", alias="orderId")
    amount: int = 0


@app.exception_handler(RequestValidationError)
async def invalid_payload_handler(request: Request, exc: RequestValidationError):
    logger.info("Failed to decode order: %s", exc.errors())
    return await http_exception_handler(request, InvalidPayload())


@app.get("/healthz")
def healthz(dapr: DaprClient = Depends(get_dapr)):
    try:
        dapr.get_metadata()
    except DaprError as e:
        logger.warning("Health check failed: %s", e)
        raise DependencyUnavailable()
    return {"status": "healthy"}


@app.get("/dapr/subscribe")
def subscriptions():
    # Publisher only.
    return []


@app.post("/orders", status_code=202, response_class=Response)
def post_orders(req: CreateOrderRequest, dapr: DaprClient = Depends(get_dapr)):
    try:
        order = create_order(req.order_id, req.amount)
    except OrderValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        accept_order(dapr, order)
    except PersistenceError as e:
        logger.error("%s: %s", e, e.__cause__)
        raise HTTPException(status_code=500, detail="failed to save order")

    return Response(status_code=202)


@app.get("/orders/{order_id:path}")
def get_order(order_id: str, dapr: DaprClient = Depends(get_dapr)):
    if not order_id:
        raise MissingIdentifier()

    try:
        order = load_order(dapr, order_id)
    except (DaprError, CorruptRecord) as e:
        logger.error("Failed to get order %s: %s", order_id, e)
        raise HTTPException(status_code=500, detail="failed to get order")

    if order is None:
        raise NotFound()
    return order.to_dict()
