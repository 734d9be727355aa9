"""
Tenant Management Use Cases

Organizations, memberships and invitations.
"""

from .accept_invitation_use_case import AcceptInvitationUseCase
from .change_role_use_case import ChangeRoleUseCase
from .create_organization_use_case import CreateOrganizationUseCase
from .dtos import (
    AcceptInvitationResponse,
    ChangeRoleResponse,
    CreateOrganizationCommand,
    InvitationInfo,
    InviteUserResponse,
    MembershipInfo,
    OrganizationInfo,
    OrganizationStats,
    RemoveMemberResponse,
    RevokeInvitationResponse,
)
from .get_organization_stats_use_case import GetOrganizationStatsUseCase
from .get_organization_use_case import GetOrganizationUseCase
from .invite_user_use_case import InviteUserUseCase
from .list_invitations_use_case import ListInvitationsUseCase
from .list_members_use_case import ListMembersUseCase
from .remove_member_use_case import RemoveMemberUseCase
from .resend_invitation_use_case import ResendInvitationUseCase
from .revoke_invitation_use_case import RevokeInvitationUseCase

__all__ = [
    "CreateOrganizationUseCase",
    "GetOrganizationUseCase",
    "GetOrganizationStatsUseCase",
    "ListMembersUseCase",
    "InviteUserUseCase",
    "AcceptInvitationUseCase",
    "ListInvitationsUseCase",
    "RevokeInvitationUseCase",
    "ResendInvitationUseCase",
    "ChangeRoleUseCase",
    "RemoveMemberUseCase",
    "CreateOrganizationCommand",
    "OrganizationInfo",
    "OrganizationStats",
    "MembershipInfo",
    "InviteUserResponse",
    "InvitationInfo",
    "RevokeInvitationResponse",
    "AcceptInvitationResponse",
    "ChangeRoleResponse",
    "RemoveMemberResponse",
]
