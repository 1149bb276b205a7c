from fastapi import APIRouter, Depends
from app.config.settings import Settings, get_settings
from app.core.dependencies import get_actor_id, get_document_store
from app.database.document_store import DocumentStore
from app.modules.actions.registry import ActionServices, dispatch
from app.modules.actions.schemas import ActionRequest, ActionResponse

router = APIRouter(prefix="/actions", tags=["actions"])


def get_action_services(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> ActionServices:
    return ActionServices(store, settings)


@router.post("", response_model=ActionResponse)
async def run_action(
    request: ActionRequest,
    actor_id: str = Depends(get_actor_id),
    services: ActionServices = Depends(get_action_services)
):
    """Run one named operation, e.g. {"action": "joinGroupByCode", "payload": {"code": "ABC23XYZ"}}"""
    return ActionResponse(ok=True, data=dispatch(services, request.action, actor_id, request.payload))
