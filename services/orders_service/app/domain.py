import json
from dataclasses import dataclass


class OrderValidationError(ValueError):
    pass


class MissingOrderId(OrderValidationError):
    def __init__(self):
        super().__init__("orderId is required")


class InvalidAmount(OrderValidationError):
    def __init__(self, amount: int):
        self.amount = amount
        super().__init__("amount must be positive")


class CorruptRecord(ValueError):
    pass


@dataclass(frozen=True)
class Order:
    order_id: str
    amount: int

    def to_dict(self) -> dict:
        return {"orderId": self.order_id, "amount": self.amount}


def create_order(order_id: str, amount: int) -> Order:
    if not order_id or not isinstance(order_id, str):
        raise MissingOrderId()
    if amount <= 0:
        raise InvalidAmount(amount)
    return Order(order_id=order_id, amount=amount)


def order_from_record(raw: bytes) -> Order:
    """Decode a state-store record written by the intake path."""
    try:
        data = json.loads(raw)
        order_id = data["orderId"]
        amount = data["amount"]
    except (ValueError, TypeError, KeyError) as e:
        raise CorruptRecord(f"unreadable order record: {e!r}") from e

    if not isinstance(order_id, str) or not isinstance(amount, int) or isinstance(amount, bool):
        raise CorruptRecord(f"unexpected field types in order record: {data!r}")
    return Order(order_id=order_id, amount=amount)
