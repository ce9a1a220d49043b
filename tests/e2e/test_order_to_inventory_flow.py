# tests/e2e/test_order_to_inventory_flow.py

import logging


def _subscribe_inventory(sidecar, inventory_client) -> None:
    # Register deliveries the way the sidecar would: from the service's own subscription list.
    for sub in inventory_client.get("/dapr/subscribe").json():
        route = sub["route"]

        def deliver(event: dict, route=route) -> None:
            r = inventory_client.post(route, json=event, headers={"content-type": "application/cloudevents+json"})
            assert r.status_code == 200
            assert r.json()["status"] == "SUCCESS"

        sidecar.subscribers[sub["topic"]] = deliver


def test_e2e_order_created_reaches_inventory(sidecar, orders_client, inventory_client, caplog):
    _subscribe_inventory(sidecar, inventory_client)

    with caplog.at_level(logging.INFO):
        r = orders_client.post("/orders", json={"orderId": "A100", "amount": 250})
    assert r.status_code == 202, r.text

    r = orders_client.get("/orders/A100")
    assert r.status_code == 200
    assert r.json() == {"orderId": "A100", "amount": 250}

    messages = [rec.getMessage() for rec in caplog.records]
    assert any(m.startswith("[INVENTORY] Received order: A100 (amount: 250)") for m in messages)
    assert "[INVENTORY] Order A100 processed successfully" in messages
    assert "Order A100 created successfully" in messages


def test_e2e_invalid_order_never_reaches_inventory(sidecar, orders_client, inventory_client, caplog):
    _subscribe_inventory(sidecar, inventory_client)

    with caplog.at_level(logging.INFO):
        r = orders_client.post("/orders", json={"orderId": "A101", "amount": 0})
    assert r.status_code == 400

    assert sidecar.published == []
    assert not any("[INVENTORY]" in rec.getMessage() for rec in caplog.records)
    assert orders_client.get("/orders/A101").status_code == 404
