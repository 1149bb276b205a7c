from fastapi import APIRouter, Depends
from app.config.permissions_config import PERMISSION_MATRIX
from app.config.settings import Settings, get_settings
from app.core.dependencies import get_actor_id, get_document_store
from app.database.document_store import DocumentStore
from app.modules.permissions.schemas import PolicyRow, SyncResult
from app.modules.permissions.service import PermissionService
from typing import List

router = APIRouter(prefix="/permissions", tags=["permissions"])


def get_permission_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> PermissionService:
    return PermissionService(store, settings)


@router.get("/matrix", response_model=List[PolicyRow])
async def get_permission_matrix():
    """Who may read, update and delete each document kind"""
    return PERMISSION_MATRIX


@router.post("/groups/{group_id}/sync", response_model=SyncResult)
async def sync_group_permissions(
    group_id: str,
    actor_id: str = Depends(get_actor_id),
    service: PermissionService = Depends(get_permission_service)
):
    """Bring every document ACL of a group in line with its roster (group admin)"""
    return service.sync_group_permissions(group_id, actor_id)
