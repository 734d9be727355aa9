from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from sqlmodel import select

from config import ApplicationConfig
from src.app.services.api_key_secrets import generate_api_key
from src.domain.entities import ApiKey
from tests.utils.factories import api_key_headers, create_organization, create_user, session_headers


@pytest.mark.asyncio
async def test_create_api_key_returns_secret_once(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)
    headers = session_headers(owner_id, org_id)

    created = await client.post(
        "/api-keys",
        json={"name": "ci", "scopes": ["organization:read"]},
        headers=headers,
    )

    assert created.status_code == 201
    data = created.json()
    assert data["key"].startswith(f"{ApplicationConfig.API_KEY_PREFIX}_")
    assert data["scopes"] == ["organization:read"]

    listed = await client.get("/api-keys", headers=headers)
    assert listed.status_code == 200
    keys = listed.json()
    assert len(keys) == 1
    assert "key" not in keys[0]
    assert keys[0]["masked_key"].endswith("********")

    # Only the hash is stored
    result = await db_session.exec(select(ApiKey))
    stored = result.one()
    assert data["key"] not in stored.key_hash
    assert stored.key_hash.startswith("$2")


@pytest.mark.asyncio
async def test_create_api_key_unknown_scope(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)

    response = await client.post(
        "/api-keys",
        json={"name": "ci", "scopes": ["billing:write"]},
        headers=session_headers(owner_id, org_id),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SCOPE"


@pytest.mark.asyncio
async def test_free_plan_api_key_limit(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)
    headers = session_headers(owner_id, org_id)

    for i in range(3):
        response = await client.post("/api-keys", json={"name": f"key-{i}"}, headers=headers)
        assert response.status_code == 201

    response = await client.post("/api-keys", json={"name": "one-too-many"}, headers=headers)

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "PLAN_LIMIT_REACHED"


@pytest.mark.asyncio
async def test_revoke_key_of_other_organization_is_not_found(client: AsyncClient, db_session):
    owner_a = await create_user(db_session, "a@acme.com")
    owner_b = await create_user(db_session, "b@globex.com")
    org_a = await create_organization(db_session, owner_a, name="Acme", slug="acme")
    org_b = await create_organization(db_session, owner_b, name="Globex", slug="globex")

    created = await client.post(
        "/api-keys", json={"name": "ci"}, headers=session_headers(owner_a, org_a)
    )
    key_id = created.json()["id"]

    response = await client.delete(f"/api-keys/{key_id}", headers=session_headers(owner_b, org_b))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "API_KEY_NOT_FOUND"


async def _insert_key(db_session, org_id, owner_id, **fields) -> str:
    generated = generate_api_key(ApplicationConfig.API_KEY_PREFIX, rounds=4)
    api_key = ApiKey(
        tenant_id=org_id,
        name="fixture",
        key_prefix=generated.key_prefix,
        key_lookup=generated.key_lookup,
        key_hash=generated.key_hash,
        scopes=["*"],
        created_by=owner_id,
        **fields,
    )
    db_session.add(api_key)
    await db_session.commit()
    return generated.key


@pytest.mark.asyncio
async def test_unusable_keys_get_identical_unauthorized(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)
    past = datetime.utcnow() - timedelta(days=1)

    revoked = await _insert_key(db_session, org_id, owner_id, is_active=False, revoked_at=past)
    expired = await _insert_key(db_session, org_id, owner_id, expires_at=past)
    inactive = await _insert_key(db_session, org_id, owner_id, is_active=False)
    valid = await _insert_key(db_session, org_id, owner_id)
    tampered = valid[:-4] + "abcd"

    bodies = []
    for key in (revoked, expired, inactive, tampered, "sk_live_garbage", ""):
        response = await client.get(
            "/api/v1/organizations/current", headers=api_key_headers(key)
        )
        assert response.status_code == 401
        bodies.append(response.json())

    assert all(body == bodies[0] for body in bodies)
    assert bodies[0] == {"error": {"code": "INVALID_API_KEY", "message": "Invalid API key."}}

    ok = await client.get("/api/v1/organizations/current", headers=api_key_headers(valid))
    assert ok.status_code == 200
