import pytest
from httpx import AsyncClient
from sqlmodel import select

from src.domain.entities import AuditEvent, Membership, MembershipRole
from tests.utils.factories import add_member, create_organization, create_user, session_headers


@pytest.mark.asyncio
async def test_create_organization_makes_caller_owner(client: AsyncClient, db_session):
    user_id = await create_user(db_session, "founder@acme.com")

    response = await client.post(
        "/organizations",
        json={"name": "Acme Corp", "slug": "acme"},
        headers=session_headers(user_id),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "acme"
    assert data["role"] == "owner"
    assert data["plan_tier"] == "free"
    assert data["subscription_status"] == "none"

    result = await db_session.exec(select(Membership).where(Membership.user_id == user_id))
    memberships = result.all()
    assert len(memberships) == 1
    assert memberships[0].role == MembershipRole.owner


@pytest.mark.asyncio
async def test_create_organization_duplicate_slug(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    other_id = await create_user(db_session, "other@acme.com")
    await create_organization(db_session, owner_id, slug="acme")

    response = await client.post(
        "/organizations",
        json={"name": "Acme Again", "slug": "acme"},
        headers=session_headers(other_id),
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "SLUG_TAKEN"


@pytest.mark.asyncio
async def test_create_organization_invalid_slug(client: AsyncClient, db_session):
    user_id = await create_user(db_session, "founder@acme.com")

    response = await client.post(
        "/organizations",
        json={"name": "Acme", "slug": "not a slug!"},
        headers=session_headers(user_id),
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_SLUG"


@pytest.mark.asyncio
async def test_change_role_records_audit_event(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    member_id = await create_user(db_session, "member@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await add_member(db_session, member_id, org_id, MembershipRole.member)

    response = await client.put(
        f"/organizations/current/members/{member_id}",
        json={"role": "admin"},
        headers=session_headers(owner_id, org_id),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "updated"
    assert data["membership"]["role"] == "admin"

    result = await db_session.exec(select(AuditEvent).where(AuditEvent.action == "role_changed"))
    audit_events = result.all()
    assert len(audit_events) == 1
    assert audit_events[0].event_metadata["old_role"] == "member"
    assert audit_events[0].event_metadata["new_role"] == "admin"


@pytest.mark.asyncio
async def test_admin_cannot_change_owner_role(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    admin_id = await create_user(db_session, "admin@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await add_member(db_session, admin_id, org_id, MembershipRole.admin)

    response = await client.put(
        f"/organizations/current/members/{owner_id}",
        json={"role": "viewer"},
        headers=session_headers(admin_id, org_id),
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CANNOT_MODIFY_OWNER"


@pytest.mark.asyncio
async def test_owner_role_cannot_be_granted(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    member_id = await create_user(db_session, "member@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await add_member(db_session, member_id, org_id, MembershipRole.member)

    response = await client.put(
        f"/organizations/current/members/{member_id}",
        json={"role": "owner"},
        headers=session_headers(owner_id, org_id),
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "CANNOT_ASSIGN_OWNER"


@pytest.mark.asyncio
async def test_remove_member(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    member_id = await create_user(db_session, "member@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await add_member(db_session, member_id, org_id, MembershipRole.member)

    response = await client.delete(
        f"/organizations/current/members/{member_id}",
        headers=session_headers(owner_id, org_id),
    )

    assert response.status_code == 200
    assert response.json()["status"] == "removed"

    # Former member is now denied
    denied = await client.get(
        "/organizations/current", headers=session_headers(member_id, org_id)
    )
    assert denied.status_code == 403


@pytest.mark.asyncio
async def test_remove_owner_is_conflict(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    org_id = await create_organization(db_session, owner_id)

    response = await client.delete(
        f"/organizations/current/members/{owner_id}",
        headers=session_headers(owner_id, org_id),
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_list_members(client: AsyncClient, db_session):
    owner_id = await create_user(db_session, "owner@acme.com")
    viewer_id = await create_user(db_session, "viewer@acme.com")
    org_id = await create_organization(db_session, owner_id)
    await add_member(db_session, viewer_id, org_id, MembershipRole.viewer)

    response = await client.get(
        "/organizations/current/members", headers=session_headers(viewer_id, org_id)
    )

    assert response.status_code == 200
    roles = {member["email"]: member["role"] for member in response.json()}
    assert roles == {"owner@acme.com": "owner", "viewer@acme.com": "viewer"}
