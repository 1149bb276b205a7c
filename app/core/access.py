"""
Group roster lookups and role checks shared by the services
"""

from typing import Any, Dict, List, Optional

from app.config.settings import Settings
from app.core.exceptions import Forbidden
from app.database.document_store import DocumentStore
from app.modules.permissions.policy import Roster

ADMIN_ROLES = ("owner", "admin")
ROLES = ("owner", "admin", "member")


def is_admin(membership: Optional[Dict[str, Any]]) -> bool:
    return bool(membership) and membership.get("role") in ADMIN_ROLES


def ensure_admin(membership: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not is_admin(membership):
        raise Forbidden("Admin permissions required.")
    return membership


def ensure_owner(membership: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not membership or membership.get("role") != "owner":
        raise Forbidden("Owner permissions required.")
    return membership


class GroupAccess:
    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.memberships = settings.collection_memberships

    def get_membership_by_user(self, group_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Membership of user_id in group_id, or None"""
        if not user_id:
            return None
        return self.store.find_document(self.memberships, {"group_id": group_id, "user_id": user_id})

    def list_group_members(self, group_id: str) -> List[Dict[str, Any]]:
        return self.store.list_all_documents(
            self.memberships, {"group_id": group_id}, order_by="display_name"
        )

    def get_roster(self, group_id: str) -> Roster:
        return Roster.from_memberships(self.list_group_members(group_id))

    def require_member(self, group_id: str, user_id: str, message: str = "You are not a member of this group.") -> Dict[str, Any]:
        membership = self.get_membership_by_user(group_id, user_id)
        if not membership:
            raise Forbidden(message)
        return membership

    def require_admin(self, group_id: str, user_id: str) -> Dict[str, Any]:
        return ensure_admin(self.get_membership_by_user(group_id, user_id))

    def require_owner(self, group_id: str, user_id: str) -> Dict[str, Any]:
        return ensure_owner(self.get_membership_by_user(group_id, user_id))
