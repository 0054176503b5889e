from conftest import TEST_PASSWORD


async def test_login_and_me(client, users):
    res = await client.post("/api/v1/auth/login", json={"username": "prod", "password": TEST_PASSWORD})
    assert res.status_code == 200, res.text
    token = res.json()["access_token"]
    assert res.json()["token_type"] == "bearer"

    res = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.json()["username"] == "prod"
    assert res.json()["role"] == "production"
    assert "hashed_password" not in res.json()


async def test_login_rejects_bad_password(client, users):
    res = await client.post("/api/v1/auth/login", json={"username": "prod", "password": "wrong"})
    assert res.status_code == 401
    assert res.json()["error"]["type"] == "http_error"


async def test_invalid_token_is_rejected(client, users):
    res = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 401


async def test_admin_manages_users(client, headers):
    res = await client.post(
        "/api/v1/users",
        json={"username": "zhang", "password": "pass1234", "name": "张工", "role": "operator"},
        headers=headers["admin"],
    )
    assert res.status_code == 201, res.text
    user_id = res.json()["id"]

    res = await client.post(
        "/api/v1/users",
        json={"username": "zhang", "password": "pass1234", "name": "dup", "role": "operator"},
        headers=headers["admin"],
    )
    assert res.status_code == 400

    res = await client.patch(f"/api/v1/users/{user_id}", json={"role": "production"}, headers=headers["admin"])
    assert res.status_code == 200
    assert res.json()["role"] == "production"

    res = await client.get("/api/v1/users", headers=headers["admin"])
    assert "zhang" in [u["username"] for u in res.json()]

    res = await client.delete(f"/api/v1/users/{user_id}", headers=headers["admin"])
    assert res.status_code == 200
    res = await client.delete(f"/api/v1/users/{user_id}", headers=headers["admin"])
    assert res.status_code == 404


async def test_unknown_role_is_rejected(client, headers):
    res = await client.post(
        "/api/v1/users",
        json={"username": "li", "password": "pass1234", "name": "Li", "role": "superuser"},
        headers=headers["admin"],
    )
    assert res.status_code == 422


async def test_non_admin_cannot_manage_users(client, headers):
    res = await client.get("/api/v1/users", headers=headers["order_entry"])
    assert res.status_code == 403


async def test_inactive_user_is_locked_out(client, headers, users):
    res = await client.patch(
        f"/api/v1/users/{users['operator'].id}", json={"is_active": False}, headers=headers["admin"]
    )
    assert res.status_code == 200
    res = await client.get("/api/v1/auth/me", headers=headers["operator"])
    assert res.status_code == 403
