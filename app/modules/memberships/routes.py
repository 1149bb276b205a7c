from fastapi import APIRouter, Depends
from app.config.settings import Settings, get_settings
from app.core.dependencies import get_actor_id, get_document_store
from app.database.document_store import DocumentStore
from app.modules.groups.schemas import GroupResponse
from app.modules.memberships.schemas import (
    JoinRequest, JoinResponse, MembershipResponse, OwnershipTransfer, RoleUpdate
)
from app.modules.memberships.service import MembershipService
from typing import List

router = APIRouter(prefix="/groups", tags=["memberships"])


def get_membership_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> MembershipService:
    return MembershipService(store, settings)


@router.post("/join", response_model=JoinResponse)
async def join_group(
    join_data: JoinRequest,
    actor_id: str = Depends(get_actor_id),
    service: MembershipService = Depends(get_membership_service)
):
    """Join a group with an invite code (returns the existing membership if already joined)"""
    return service.join_group_by_code(join_data.code, actor_id, join_data.display_name)


@router.get("/{group_id}/members", response_model=List[MembershipResponse])
async def list_members(
    group_id: str,
    actor_id: str = Depends(get_actor_id),
    service: MembershipService = Depends(get_membership_service)
):
    """List all members of a group (only if caller is a member)"""
    return service.list_members(group_id, actor_id)


@router.put("/{group_id}/members/{membership_id}/role", response_model=MembershipResponse)
async def update_member_role(
    group_id: str,
    membership_id: str,
    role_data: RoleUpdate,
    actor_id: str = Depends(get_actor_id),
    service: MembershipService = Depends(get_membership_service)
):
    """Promote to admin (group admin) or demote to member (group owner)"""
    return service.update_member_role(group_id, membership_id, role_data.new_role, actor_id)


@router.post("/{group_id}/transfer-ownership", response_model=GroupResponse)
async def transfer_ownership(
    group_id: str,
    transfer: OwnershipTransfer,
    actor_id: str = Depends(get_actor_id),
    service: MembershipService = Depends(get_membership_service)
):
    """Transfer group ownership (group owner)"""
    return service.transfer_ownership(
        group_id, transfer.current_owner_membership_id, transfer.next_owner_membership_id, actor_id
    )


@router.delete("/{group_id}/members/{membership_id}", status_code=204)
async def remove_member(
    group_id: str,
    membership_id: str,
    actor_id: str = Depends(get_actor_id),
    service: MembershipService = Depends(get_membership_service)
):
    """Remove a member (group admin) or leave the group (own membership)"""
    service.remove_member(group_id, membership_id, actor_id)
    return None
