from fastapi import APIRouter, Depends
from app.config.settings import Settings, get_settings
from app.core.dependencies import get_actor_id, get_document_store
from app.database.document_store import DocumentStore
from app.modules.quotes.schemas import QuoteCreate, QuoteResponse
from app.modules.quotes.service import QuoteService
from typing import List, Optional

router = APIRouter(prefix="/groups/{group_id}/quotes", tags=["quotes"])


def get_quote_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> QuoteService:
    return QuoteService(store, settings)


@router.get("", response_model=List[QuoteResponse])
async def list_quotes(
    group_id: str,
    person_id: Optional[str] = None,
    actor_id: str = Depends(get_actor_id),
    service: QuoteService = Depends(get_quote_service)
):
    """List quotes of a group, newest first (group member)"""
    return service.list_quotes(group_id, actor_id, person_id=person_id)


@router.post("", response_model=QuoteResponse, status_code=201)
async def create_quote(
    group_id: str,
    quote_data: QuoteCreate,
    actor_id: str = Depends(get_actor_id),
    service: QuoteService = Depends(get_quote_service)
):
    """Add a quote (group member)"""
    return service.create_quote(
        group_id, quote_data.person_id, quote_data.text, actor_id, created_by_name=quote_data.created_by_name
    )


@router.delete("/{quote_id}", status_code=204)
async def delete_quote(
    group_id: str,
    quote_id: str,
    actor_id: str = Depends(get_actor_id),
    service: QuoteService = Depends(get_quote_service)
):
    """Delete a quote (group admin)"""
    service.delete_quote(group_id, quote_id, actor_id)
    return None
