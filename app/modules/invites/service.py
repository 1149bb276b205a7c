import logging
import random
from typing import List, Optional

from app.config.settings import Settings
from app.core.access import GroupAccess
from app.core.exceptions import NotFound, ValidationError, ensure_actor
from app.core.utils import clean
from app.database.document_store import DocumentStore
from app.modules.invites.codes import InviteCodeGenerator, normalize_code
from app.modules.invites.schemas import InviteLookupResponse, InviteResponse

logger = logging.getLogger(__name__)


class InviteService:
    def __init__(self, store: DocumentStore, settings: Settings, rng: Optional[random.Random] = None):
        self.store = store
        self.settings = settings
        self.collection = settings.collection_invites
        self.access = GroupAccess(store, settings)
        self.codes = InviteCodeGenerator(store, settings, rng=rng)

    def create_invite(self, group_id: str, actor_id: str, name: Optional[str] = None) -> InviteResponse:
        """Create an invite for a group (admins only)"""
        ensure_actor(actor_id)
        group_id = clean(group_id)
        if not group_id:
            raise ValidationError("Group is required.")

        self.access.require_admin(group_id, actor_id)
        group = self.store.get_document(self.settings.collection_groups, group_id)
        roster = self.access.get_roster(group_id)

        invite = self.codes.generate(
            group_id=group_id,
            group_name=group.get("name") or "Group",
            created_by=actor_id,
            admin_ids=roster.admin_ids,
            label=name
        )
        logger.info(f"Invite {invite['id']} created for group {group_id} by {actor_id}")
        return InviteResponse(**invite)

    def rename_invite(self, invite_id: str, name: str, actor_id: str) -> InviteResponse:
        """Rename an invite (admins of the invite's group only)"""
        ensure_actor(actor_id)
        invite_id = clean(invite_id)
        name = clean(name)
        if not invite_id or not name:
            raise ValidationError("Invite and name are required.")

        invite = self.store.get_document(self.collection, invite_id)
        self.access.require_admin(invite["group_id"], actor_id)

        updated = self.store.update_document(self.collection, invite_id, {"name": name})
        return InviteResponse(**updated)

    def delete_invite(self, invite_id: str, actor_id: str) -> bool:
        """Delete an invite (admins of the invite's group only)"""
        ensure_actor(actor_id)
        invite_id = clean(invite_id)
        if not invite_id:
            raise ValidationError("Invite is required.")

        invite = self.store.get_document(self.collection, invite_id)
        self.access.require_admin(invite["group_id"], actor_id)

        self.store.delete_document(self.collection, invite_id)
        logger.info(f"Invite {invite_id} deleted from group {invite['group_id']} by {actor_id}")
        return True

    def find_by_code(self, code: str) -> dict:
        code = normalize_code(code)
        if not code:
            raise ValidationError("Invite code is required.")
        invite = self.store.find_document(self.collection, {"code": code})
        if not invite:
            raise NotFound("Invite code is invalid.")
        return invite

    def resolve_invite(self, code: str, actor_id: str) -> InviteLookupResponse:
        """Look up an invite by code; open to any authenticated user"""
        ensure_actor(actor_id)
        return InviteLookupResponse(**self.find_by_code(code))

    def list_invites(self, group_id: str, actor_id: str) -> List[InviteResponse]:
        ensure_actor(actor_id)
        self.access.require_admin(group_id, actor_id)
        invites = self.store.list_all_documents(self.collection, {"group_id": group_id}, order_by="created_at")
        return [InviteResponse(**invite) for invite in invites]
