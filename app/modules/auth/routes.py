from fastapi import APIRouter, Depends
from app.config.settings import Settings, get_settings
from app.core.dependencies import get_current_user_id, get_document_store
from app.database.document_store import DocumentStore
from app.modules.auth.schemas import CurrentUserResponse
from app.modules.memberships.schemas import MembershipResponse
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
):
    """Get current authenticated user and the groups they belong to (for frontend UI)."""
    memberships = store.list_all_documents(
        settings.collection_memberships, {"user_id": current_user["id"]}, order_by="group_name"
    )
    return CurrentUserResponse(
        **current_user,
        memberships=[MembershipResponse(**m) for m in memberships]
    )
