from pipetrack.core.deps import get_session


async def test_get_session_passes_the_request_session_through(db_session):
    assert await get_session(db_session) is db_session


async def test_session_backed_routes_respond(client, headers):
    res = await client.get("/api/v1/master-data", headers=headers["operator"])
    assert res.status_code == 200, res.text

    res = await client.get("/api/v1/orders", headers=headers["operator"])
    assert res.status_code == 200, res.text
    assert res.json() == []
