"""
Core dependencies for resolving the acting user and building services
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config.settings import Settings, get_settings
from app.core.exceptions import MissingActorError, ensure_actor
from app.database.document_store import DocumentStore, SupabaseDocumentStore
from app.database.supabase_client import get_service_supabase, get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    if credentials is None or not credentials.credentials:
        raise MissingActorError("Missing authenticated user context.")
    return auth_service.get_current_user(credentials.credentials)


def get_actor_id(user_data: dict = Depends(get_current_user_id)) -> str:
    """Id of the user every operation acts on behalf of"""
    return ensure_actor(user_data.get("id", ""))


def get_document_store(settings: Settings = Depends(get_settings)) -> DocumentStore:
    """
    Store backed by the service role client.

    Documents of every member are rewritten when the roster changes, which the
    caller's own token could not do under row level security.
    """
    return SupabaseDocumentStore(get_service_supabase(), page_size=settings.page_size)
