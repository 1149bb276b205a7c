from fastapi import APIRouter, Depends
from app.config.settings import Settings, get_settings
from app.core.dependencies import get_actor_id, get_document_store
from app.database.document_store import DocumentStore
from app.modules.people.schemas import (
    ClaimResponse, PersonResponse, PlaceholderCreate, UnclaimResponse
)
from app.modules.people.service import PersonService
from typing import List

router = APIRouter(prefix="/groups/{group_id}", tags=["people"])


def get_person_service(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> PersonService:
    return PersonService(store, settings)


@router.get("/people", response_model=List[PersonResponse])
async def list_people(
    group_id: str,
    actor_id: str = Depends(get_actor_id),
    service: PersonService = Depends(get_person_service)
):
    """List people of a group (group member)"""
    return service.list_people(group_id, actor_id)


@router.get("/people/claimable", response_model=List[PersonResponse])
async def list_claimable_placeholders(
    group_id: str,
    actor_id: str = Depends(get_actor_id),
    service: PersonService = Depends(get_person_service)
):
    """Placeholders created before the caller joined"""
    return service.list_claimable_placeholders(group_id, actor_id)


@router.post("/people", response_model=PersonResponse, status_code=201)
async def create_placeholder(
    group_id: str,
    person_data: PlaceholderCreate,
    actor_id: str = Depends(get_actor_id),
    service: PersonService = Depends(get_person_service)
):
    """Create a placeholder person (group member)"""
    return service.create_placeholder_person(group_id, person_data.name, actor_id)


@router.delete("/people/{person_id}", status_code=204)
async def remove_person(
    group_id: str,
    person_id: str,
    force: bool = False,
    actor_id: str = Depends(get_actor_id),
    service: PersonService = Depends(get_person_service)
):
    """Remove a placeholder (group admin); force=true also deletes its quotes"""
    service.remove_person(group_id, person_id, actor_id, force=force)
    return None


@router.post("/people/{person_id}/claim", response_model=ClaimResponse)
async def claim_placeholder(
    group_id: str,
    person_id: str,
    actor_id: str = Depends(get_actor_id),
    service: PersonService = Depends(get_person_service)
):
    """Claim a placeholder and take over its quotes"""
    return service.claim_placeholder(group_id, person_id, actor_id)


@router.delete("/claim", response_model=UnclaimResponse)
async def unclaim_placeholder(
    group_id: str,
    actor_id: str = Depends(get_actor_id),
    service: PersonService = Depends(get_person_service)
):
    """Undo the caller's claim; the quotes move to a new placeholder"""
    return service.unclaim_placeholder(group_id, actor_id)
