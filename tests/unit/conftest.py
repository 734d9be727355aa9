import pytest
from unittest.mock import AsyncMock, MagicMock


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork; repository methods are AsyncMocks"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    for repository, methods in {
        "users": ["get_by_id", "get_by_email", "get_many"],
        "tenants": [
            "get_by_id",
            "get_by_slug",
            "get_by_stripe_subscription_id",
            "get_by_stripe_customer_id",
            "create",
            "update",
        ],
        "memberships": [
            "get_by_user_and_tenant",
            "get_by_tenant_id",
            "count_by_tenant_id",
            "create",
            "update",
            "delete",
        ],
        "invitations": [
            "get_by_id",
            "get_by_token",
            "get_by_tenant_id",
            "get_open_for_email",
            "add",
            "save",
        ],
        "api_keys": [
            "get_by_id",
            "get_by_lookup",
            "get_active_by_tenant_id",
            "create",
            "update",
            "touch_last_used",
        ],
        "webhook_events": ["get_by_event_id", "insert_if_absent", "claim_failed", "update"],
        "audit_events": ["create"],
    }.items():
        repo = MagicMock()
        for method in methods:
            setattr(repo, method, AsyncMock())
        setattr(uow, repository, repo)

    # create/update return the entity they were given
    uow.tenants.create.side_effect = lambda entity: entity
    uow.tenants.update.side_effect = lambda entity: entity
    uow.memberships.create.side_effect = lambda entity: entity
    uow.memberships.update.side_effect = lambda entity: entity
    uow.invitations.add.side_effect = lambda entity: entity
    uow.invitations.save.side_effect = lambda entity: entity
    uow.api_keys.create.side_effect = lambda entity: entity
    uow.api_keys.update.side_effect = lambda entity: entity
    uow.webhook_events.update.side_effect = lambda entity: entity

    return uow
