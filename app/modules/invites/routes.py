from fastapi import APIRouter, Depends
from app.config.settings import Settings, get_settings
from app.core.dependencies import get_actor_id, get_document_store
from app.database.document_store import DocumentStore
from app.modules.invites.schemas import InviteCreate, InviteLookupResponse, InviteRename, InviteResponse
from app.modules.invites.service import InviteService
from typing import List

router = APIRouter(tags=["invites"])


def get_invite_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> InviteService:
    return InviteService(store, settings)


@router.post("/groups/{group_id}/invites", response_model=InviteResponse, status_code=201)
async def create_invite(
    group_id: str,
    invite_data: InviteCreate,
    actor_id: str = Depends(get_actor_id),
    service: InviteService = Depends(get_invite_service)
):
    """Create an invite code for a group (group admin)"""
    return service.create_invite(group_id, actor_id, invite_data.name)


@router.get("/groups/{group_id}/invites", response_model=List[InviteResponse])
async def list_invites(
    group_id: str,
    actor_id: str = Depends(get_actor_id),
    service: InviteService = Depends(get_invite_service)
):
    """List a group's invites (group admin)"""
    return service.list_invites(group_id, actor_id)


@router.get("/invites/code/{code}", response_model=InviteLookupResponse)
async def resolve_invite(
    code: str,
    actor_id: str = Depends(get_actor_id),
    service: InviteService = Depends(get_invite_service)
):
    """Look up an invite by code (any authenticated user)"""
    return service.resolve_invite(code, actor_id)


@router.put("/invites/{invite_id}", response_model=InviteResponse)
async def rename_invite(
    invite_id: str,
    invite_data: InviteRename,
    actor_id: str = Depends(get_actor_id),
    service: InviteService = Depends(get_invite_service)
):
    """Rename an invite (group admin)"""
    return service.rename_invite(invite_id, invite_data.name, actor_id)


@router.delete("/invites/{invite_id}", status_code=204)
async def delete_invite(
    invite_id: str,
    actor_id: str = Depends(get_actor_id),
    service: InviteService = Depends(get_invite_service)
):
    """Delete an invite (group admin)"""
    service.delete_invite(invite_id, actor_id)
    return None
