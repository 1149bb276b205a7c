from typing import Any, Callable, Dict, List
import logging

from app.config.settings import Settings
from app.core.access import GroupAccess
from app.core.exceptions import NotFound, ValidationError, ensure_actor, step
from app.core.utils import clean
from app.database.document_store import DocumentStore
from app.modules.permissions.policy import Roster, permissions_equal, required_permissions
from app.modules.permissions.schemas import SyncResult

logger = logging.getLogger(__name__)

# Document kind -> filter selecting that kind's documents for a group, in sync order
SYNC_TARGETS: Dict[str, Callable[[str], Dict[str, Any]]] = {
    "groups": lambda group_id: {"id": group_id},
    "memberships": lambda group_id: {"group_id": group_id},
    "people": lambda group_id: {"group_id": group_id},
    "quotes": lambda group_id: {"group_id": group_id},
    "invites": lambda group_id: {"group_id": group_id},
}


class PermissionService:
    """Keeps every document ACL of a group equal to what the roster requires"""

    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings
        self.access = GroupAccess(store, settings)

    def sync_group_permissions(self, group_id: str, actor_id: str, enforce_admin: bool = True) -> SyncResult:
        """
        Rewrite the ACL of every group document whose ACL differs from the policy.

        Writes nothing when all ACLs already match, so it is safe to call repeatedly
        or from several callers at once. The first failed write aborts the run; calling
        again picks up where it stopped. enforce_admin=False skips the actor check, used
        right after a join or a self-leave when the actor can't pass it.
        """
        ensure_actor(actor_id)
        group_id = clean(group_id)
        if not group_id:
            raise ValidationError("Group is required.")

        if enforce_admin:
            self.access.require_admin(group_id, actor_id)

        with step("Loading group roster"):
            memberships = self.access.list_group_members(group_id)
        roster = Roster.from_memberships(memberships)

        updated = 0
        for kind in SYNC_TARGETS:
            updated += self._sync_kind(kind, group_id, roster, memberships)

        logger.info(f"Synced permissions for group {group_id}: {updated} document(s) updated")
        return SyncResult(
            member_ids=roster.member_ids,
            admin_ids=roster.admin_ids,
            owner_id=roster.owner_id,
            updated=updated
        )

    def _load_documents(self, kind: str, group_id: str, memberships: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if kind == "memberships":
            return memberships
        documents = self.store.list_all_documents(
            self.settings.collections[kind], SYNC_TARGETS[kind](group_id)
        )
        if kind == "groups" and not documents:
            raise NotFound("Group not found")
        return documents

    def _sync_kind(self, kind: str, group_id: str, roster: Roster, memberships: List[Dict[str, Any]]) -> int:
        collection = self.settings.collections[kind]
        updated = 0
        with step(f"Syncing permissions for {kind}"):
            for document in self._load_documents(kind, group_id, memberships):
                desired = required_permissions(kind, roster, document)
                if permissions_equal(document.get("permissions"), desired):
                    continue
                self.store.update_document(collection, document["id"], permissions=desired)
                logger.debug(f"Updated permissions of {collection}/{document['id']}")
                updated += 1
        return updated
