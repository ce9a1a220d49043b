import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .domain import PayloadDecodeError, decode_order, event_data

logger = logging.getLogger(__name__)


class DeliveryStatus(str, Enum):
    SUCCESS = "SUCCESS"
    DROP = "DROP"


@dataclass(frozen=True)
class DeliveryResult:
    status: DeliveryStatus
    # Each delivery is handled or discarded once; redelivery is left to the sidecar.
    retry: bool = False


def handle_order_event(envelope: Mapping) -> DeliveryResult:
    try:
        order = decode_order(event_data(envelope))
    except PayloadDecodeError as e:
        logger.error("error decoding order event %s: %s", envelope.get("id"), e)
        return DeliveryResult(DeliveryStatus.DROP)

    if not order.is_valid:
        if not order.order_id:
            logger.error("error: received order with empty orderId, dropping")
        else:
            logger.error("error: received order %s with invalid amount: %d, dropping", order.order_id, order.amount)
        return DeliveryResult(DeliveryStatus.SUCCESS)

    logger.info(
        "[INVENTORY] Received order: %s (amount: %d) - %s",
        order.order_id,
        order.amount,
        datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    )
    logger.info("[INVENTORY] Order %s processed successfully", order.order_id)
    return DeliveryResult(DeliveryStatus.SUCCESS)
