"""Order intake workflow.

Saving the order is the only step that decides the outcome of a request.
Publishing the order-created event and writing the receipt run afterwards
on a best-effort basis: a failure there is logged and reported in the
IntakeResult, but the order is already stored so the request succeeds.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from services.common.dapr_client import DaprClient, DaprError

from .domain import Order, order_from_record
from .publisher import publish_order_created
from .receipts import store_receipt

logger = logging.getLogger(__name__)

STATE_STORE_NAME = os.getenv("STATE_STORE_NAME", "statestore")


class PersistenceError(RuntimeError):
    pass


@dataclass(frozen=True)
class SideEffect:
    name: str
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class IntakeResult:
    order: Order
    side_effects: tuple[SideEffect, ...]

    @property
    def degraded(self) -> bool:
        return any(not s.ok for s in self.side_effects)


BEST_EFFORT_STEPS: tuple[tuple[str, Callable[[DaprClient, Order], None]], ...] = (
    ("publish", publish_order_created),
    ("receipt", store_receipt),
)


def save_order(dapr: DaprClient, order: Order) -> None:
    try:
        dapr.save_state(STATE_STORE_NAME, order.order_id, order.to_dict())
    except DaprError as e:
        raise PersistenceError(f"failed to save order {order.order_id}") from e


def load_order(dapr: DaprClient, order_id: str) -> Order | None:
    """Return the stored order, or None if nothing was saved under order_id.

    DaprError propagates on store failures and CorruptRecord on an
    undecodable value.
    """
    raw = dapr.get_state(STATE_STORE_NAME, order_id)
    if raw is None:
        return None
    return order_from_record(raw)


def _best_effort(name: str, step: Callable[[DaprClient, Order], None], dapr: DaprClient, order: Order) -> SideEffect:
    try:
        step(dapr, order)
    except Exception as e:
        logger.error("%s step failed for order %s: %s", name, order.order_id, e)
        return SideEffect(name, e)
    return SideEffect(name)


def accept_order(dapr: DaprClient, order: Order) -> IntakeResult:
    save_order(dapr, order)

    side_effects = tuple(_best_effort(name, step, dapr, order) for name, step in BEST_EFFORT_STEPS)

    logger.info("Order %s created successfully", order.order_id)
    return IntakeResult(order=order, side_effects=side_effects)
