from fastapi import APIRouter, Depends
from app.config.settings import Settings, get_settings
from app.core.dependencies import get_actor_id, get_document_store
from app.database.document_store import DocumentStore
from app.modules.groups.schemas import GroupCreate, GroupUpdate, GroupResponse, GroupWithOwnerResponse
from app.modules.groups.service import GroupService
from typing import List

router = APIRouter(prefix="/groups", tags=["groups"])


def get_group_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> GroupService:
    return GroupService(store, settings)


@router.post("", response_model=GroupWithOwnerResponse, status_code=201)
async def create_group(
    group_data: GroupCreate,
    actor_id: str = Depends(get_actor_id),
    service: GroupService = Depends(get_group_service)
):
    """Create a new group owned by the caller"""
    return service.create_group_with_owner(group_data.name, actor_id, group_data.display_name)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    actor_id: str = Depends(get_actor_id),
    service: GroupService = Depends(get_group_service)
):
    """List groups the caller is a member of"""
    return service.list_groups(actor_id)


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: str,
    actor_id: str = Depends(get_actor_id),
    service: GroupService = Depends(get_group_service)
):
    """Get group by ID (only if caller is a member)"""
    return service.get_group_by_id(group_id, actor_id)


@router.put("/{group_id}", response_model=GroupResponse)
async def rename_group(
    group_id: str,
    group_data: GroupUpdate,
    actor_id: str = Depends(get_actor_id),
    service: GroupService = Depends(get_group_service)
):
    """Rename group (group admin)"""
    return service.rename_group(group_id, group_data.name, actor_id)
