async def test_register_and_list_values(client, headers):
    res = await client.post("/api/v1/master-data/specs", json={"value": "DN700"}, headers=headers["production"])
    assert res.status_code == 200, res.text
    assert res.json() == {"category": "specs", "values": ["DN700"]}

    res = await client.post("/api/v1/master-data/specs", json={"value": "DN700"}, headers=headers["order_entry"])
    assert res.json()["values"] == ["DN700"]

    res = await client.get("/api/v1/master-data", headers=headers["operator"])
    assert res.status_code == 200
    assert res.json()["specs"] == ["DN700"]
    assert res.json()["workshops"] == []

    res = await client.get("/api/v1/master-data/specs", headers=headers["operator"])
    assert res.json()["values"] == ["DN700"]


async def test_unknown_category(client, headers):
    res = await client.get("/api/v1/master-data/colors", headers=headers["operator"])
    assert res.status_code == 400
    res = await client.post("/api/v1/master-data/colors", json={"value": "red"}, headers=headers["production"])
    assert res.status_code == 400


async def test_operator_cannot_register(client, headers):
    res = await client.post("/api/v1/master-data/specs", json={"value": "DN700"}, headers=headers["operator"])
    assert res.status_code == 403
