import os

from services.common.dapr_client import DaprClient

from .domain import Order

RECEIPT_BINDING_NAME = os.getenv("RECEIPT_BINDING_NAME", "storage")


def receipt_name(order: Order) -> str:
    return f"{order.order_id}.txt"


def receipt_text(order: Order) -> str:
    return f"Order receipt for {order.order_id}"


def store_receipt(dapr: DaprClient, order: Order) -> None:
    name = receipt_name(order)
    # Blob, S3 and local-storage bindings each read a different metadata key.
    metadata = {"blobName": name, "key": name, "fileName": name}
    dapr.invoke_binding(RECEIPT_BINDING_NAME, "create", receipt_text(order), metadata)
