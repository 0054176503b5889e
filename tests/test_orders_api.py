import uuid

from conftest import order_payload


def production_body(sub_order_id, quantity, process=None, **extra):
    body = {
        "sub_order_id": str(sub_order_id),
        "quantity": quantity,
        "team": "甲班",
        "shift": "白班",
        "operator_id": "prod",
    }
    if process is not None:
        body["process"] = process
    body.update(extra)
    return body


def shipping_body(sub_order_id, quantity, **extra):
    body = {
        "sub_order_id": str(sub_order_id),
        "quantity": quantity,
        "transport_type": "汽车",
        "shipping_type": "送货",
        "operator_id": "prod",
    }
    body.update(extra)
    return body


async def create_order(client, headers, **kwargs) -> str:
    res = await client.post("/api/v1/orders", json=order_payload(**kwargs), headers=headers["order_entry"])
    assert res.status_code == 201, res.text
    return res.json()["id"]


async def test_health(client):
    res = await client.get("/api/v1/health")
    assert res.status_code == 200
    assert res.json() == {"message": "Healthy", "details": None}
    assert res.headers["X-Correlation-ID"]


async def test_order_lifecycle_end_to_end(client, headers):
    order_id = await create_order(client, headers, order_no="ORD-1")

    res = await client.get(f"/api/v1/orders/{order_id}", headers=headers["operator"])
    assert res.status_code == 200
    order = res.json()
    assert order["status"] == "new"
    assert order["created_by"] == "entry"
    item = order["items"][0]
    assert item["line_no"] == 1
    assert item["status"] == "new"
    # DN100 K9 weighs 95 kg per pipe
    assert float(item["unit_weight"]) == 0.095
    assert float(item["total_weight"]) == 0.95
    sub_id = item["id"]

    for _ in range(2):
        res = await client.post(
            "/api/v1/production/records", json=production_body(sub_id, 5), headers=headers["production"]
        )
        assert res.status_code == 201, res.text

    res = await client.get(f"/api/v1/orders/{order_id}", headers=headers["operator"])
    item = res.json()["items"][0]
    assert item["produced_quantity"] == 10
    assert item["status"] == "production_completed"
    assert item["production_percent"] == 100

    res = await client.post("/api/v1/shipping/records", json=shipping_body(sub_id, 10), headers=headers["operator"])
    assert res.status_code == 201, res.text

    res = await client.get("/api/v1/orders/by-number/ORD-1", headers=headers["operator"])
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "completed"
    assert body["items"][0]["status"] == "completed"
    assert body["items"][0]["shipping_percent"] == 100


async def test_duplicate_order_number_is_rejected(client, headers):
    await create_order(client, headers, order_no="ORD-DUP")
    res = await client.post("/api/v1/orders", json=order_payload("ORD-DUP"), headers=headers["order_entry"])
    assert res.status_code == 400
    body = res.json()
    assert body["error"]["type"] == "validation_error"
    assert body["path"] == "/api/v1/orders"


async def test_non_positive_planned_quantity_is_a_request_error(client, headers):
    res = await client.post("/api/v1/orders", json=order_payload("ORD-0", planned=0), headers=headers["order_entry"])
    assert res.status_code == 422
    assert res.json()["error"]["type"] == "request_validation_error"


async def test_order_list_is_newest_first_and_cached_view_sees_writes(client, headers):
    first = await create_order(client, headers, order_no="ORD-A")
    res = await client.get("/api/v1/orders", headers=headers["operator"])
    assert [o["id"] for o in res.json()] == [first]

    second = await create_order(client, headers, order_no="ORD-B")
    res = await client.get("/api/v1/orders", headers=headers["operator"])
    assert [o["id"] for o in res.json()] == [second, first]

    sub_id = res.json()[1]["items"][0]["id"]
    await client.post("/api/v1/production/records", json=production_body(sub_id, 3), headers=headers["production"])
    res = await client.get("/api/v1/orders", headers=headers["operator"])
    assert res.json()[1]["items"][0]["produced_quantity"] == 3


async def test_patch_accepts_only_enumerated_fields(client, headers):
    order_id = await create_order(client, headers, order_no="ORD-P")
    res = await client.patch(
        f"/api/v1/orders/{order_id}",
        json={"customer_name": "New Name", "remarks": "rush"},
        headers=headers["order_entry"],
    )
    assert res.status_code == 200, res.text
    assert res.json()["customer_name"] == "New Name"
    assert res.json()["remarks"] == "rush"

    res = await client.patch(f"/api/v1/orders/{order_id}", json={"status": "completed"}, headers=headers["order_entry"])
    assert res.status_code == 422


async def test_soft_delete_hides_order_but_keeps_ledger(client, headers):
    order_id = await create_order(client, headers, order_no="ORD-DEL")
    res = await client.get(f"/api/v1/orders/{order_id}", headers=headers["operator"])
    sub_id = res.json()["items"][0]["id"]
    await client.post("/api/v1/production/records", json=production_body(sub_id, 2), headers=headers["production"])

    res = await client.delete(f"/api/v1/orders/{order_id}", headers=headers["order_entry"])
    assert res.status_code == 200

    assert (await client.get(f"/api/v1/orders/{order_id}", headers=headers["operator"])).status_code == 404
    assert (await client.get("/api/v1/orders/by-number/ORD-DEL", headers=headers["operator"])).status_code == 404
    assert (await client.get("/api/v1/orders", headers=headers["operator"])).json() == []
    res = await client.get("/api/v1/production/records", params={"order_id": order_id}, headers=headers["operator"])
    assert len(res.json()) == 1

    res = await client.delete(f"/api/v1/orders/{order_id}", headers=headers["order_entry"])
    assert res.status_code == 404
    assert res.json()["error"]["type"] == "not_found"

    # The number stays taken
    res = await client.post("/api/v1/orders", json=order_payload("ORD-DEL"), headers=headers["order_entry"])
    assert res.status_code == 400


async def test_recompute_endpoint(client, headers):
    order_id = await create_order(client, headers, order_no="ORD-R")
    res = await client.get(f"/api/v1/orders/{order_id}", headers=headers["operator"])
    sub_id = res.json()["items"][0]["id"]
    await client.post("/api/v1/production/records", json=production_body(sub_id, 4), headers=headers["production"])
    await client.post("/api/v1/shipping/records", json=shipping_body(sub_id, 1), headers=headers["production"])

    res = await client.post(f"/api/v1/orders/{order_id}/recompute", headers=headers["production"])
    assert res.status_code == 200, res.text
    item = res.json()["items"][0]
    assert item["produced_quantity"] == 4
    assert item["shipped_quantity"] == 1
    assert item["status"] == "shipping_during_production"

    res = await client.post(f"/api/v1/orders/{uuid.uuid4()}/recompute", headers=headers["production"])
    assert res.status_code == 404


async def test_ledger_validation_errors(client, headers):
    order_id = await create_order(client, headers, order_no="ORD-V")
    res = await client.get(f"/api/v1/orders/{order_id}", headers=headers["operator"])
    sub_id = res.json()["items"][0]["id"]

    res = await client.post("/api/v1/production/records", json=production_body(sub_id, 0), headers=headers["production"])
    assert res.status_code == 400
    res = await client.post(
        "/api/v1/production/records", json=production_body(sub_id, 1, "welding"), headers=headers["production"]
    )
    assert res.status_code == 400
    res = await client.post(
        "/api/v1/production/records", json=production_body(uuid.uuid4(), 1), headers=headers["production"]
    )
    assert res.status_code == 400
    res = await client.post("/api/v1/shipping/records", json=shipping_body(sub_id, -2), headers=headers["production"])
    assert res.status_code == 400

    res = await client.get(f"/api/v1/orders/{order_id}", headers=headers["operator"])
    assert res.json()["items"][0]["produced_quantity"] == 0


async def test_roles_guard_writes(client, headers):
    res = await client.post("/api/v1/orders", json=order_payload("ORD-X"), headers=headers["operator"])
    assert res.status_code == 403
    res = await client.post("/api/v1/orders", json=order_payload("ORD-X"), headers=headers["admin"])
    assert res.status_code == 201
    assert (await client.get("/api/v1/orders")).status_code == 401
