import logging
import random
from typing import List, Optional

from app.config.settings import Settings
from app.core.access import GroupAccess
from app.core.exceptions import ValidationError, ensure_actor
from app.core.utils import clean, new_document_id, now_iso
from app.database.document_store import DocumentStore
from app.modules.groups.schemas import GroupResponse, GroupWithOwnerResponse
from app.modules.invites.codes import InviteCodeGenerator
from app.modules.invites.schemas import InviteResponse
from app.modules.memberships.schemas import MembershipResponse
from app.modules.people.schemas import PersonResponse
from app.modules.permissions.policy import (
    Roster, group_permissions, membership_permissions, person_permissions
)

logger = logging.getLogger(__name__)


class GroupService:
    def __init__(self, store: DocumentStore, settings: Settings, rng: Optional[random.Random] = None):
        self.store = store
        self.settings = settings
        self.collections = settings.collections
        self.access = GroupAccess(store, settings)
        self.codes = InviteCodeGenerator(store, settings, rng=rng)

    def create_group_with_owner(self, name: str, actor_id: str, display_name: Optional[str] = None) -> GroupWithOwnerResponse:
        """Create a group with the actor as owner, their person, and a default invite"""
        ensure_actor(actor_id)
        name = clean(name)
        display_name = clean(display_name, "Owner")
        if not name:
            raise ValidationError("Group name is required.")

        created_at = now_iso()
        group_id = new_document_id()
        roster = Roster(member_ids=[actor_id], admin_ids=[actor_id], owner_id=actor_id)

        group = self.store.create_document(
            self.collections["groups"],
            group_id,
            {"name": name, "owner_id": actor_id, "created_at": created_at},
            group_permissions(roster)
        )

        person = self.store.create_document(
            self.collections["people"],
            new_document_id(),
            {
                "group_id": group_id,
                "name": display_name,
                "user_id": actor_id,
                "is_placeholder": False,
                "created_at": created_at,
                "created_by": actor_id
            },
            person_permissions(roster, is_placeholder=False)
        )

        membership = self.store.create_document(
            self.collections["memberships"],
            new_document_id(),
            {
                "group_id": group_id,
                "group_name": name,
                "user_id": actor_id,
                "role": "owner",
                "display_name": display_name,
                "person_id": person["id"],
                "claimed_placeholder_id": "",
                "claimed_placeholder_name": "",
                "created_at": created_at
            },
            membership_permissions(roster, actor_id)
        )

        invite = self.codes.generate(
            group_id=group_id,
            group_name=name,
            created_by=actor_id,
            admin_ids=roster.admin_ids,
            label=self.settings.default_invite_name
        )

        logger.info(f"Group {group_id} created by {actor_id}")
        return GroupWithOwnerResponse(
            group=GroupResponse(**group),
            membership=MembershipResponse(**membership),
            person=PersonResponse(**person),
            invite=InviteResponse(**invite)
        )

    def get_group_by_id(self, group_id: str, actor_id: str) -> GroupResponse:
        """Get group by ID (members only)"""
        ensure_actor(actor_id)
        self.access.require_member(group_id, actor_id)
        return GroupResponse(**self.store.get_document(self.collections["groups"], group_id))

    def rename_group(self, group_id: str, name: str, actor_id: str) -> GroupResponse:
        """Rename a group and the copies of its name on memberships and invites (admins only)"""
        ensure_actor(actor_id)
        group_id = clean(group_id)
        name = clean(name)
        if not group_id or not name:
            raise ValidationError("Group and name are required.")
        self.access.require_admin(group_id, actor_id)

        group = self.store.update_document(self.collections["groups"], group_id, {"name": name})

        for kind in ("memberships", "invites"):
            documents = self.store.list_all_documents(self.collections[kind], {"group_id": group_id})
            for document in documents:
                if document.get("group_name") != name:
                    self.store.update_document(self.collections[kind], document["id"], {"group_name": name})

        logger.info(f"Group {group_id} renamed by {actor_id}")
        return GroupResponse(**group)

    def list_groups(self, actor_id: str) -> List[GroupResponse]:
        """Groups the actor is a member of"""
        ensure_actor(actor_id)
        memberships = self.store.list_all_documents(
            self.collections["memberships"], {"user_id": actor_id}, order_by="group_name"
        )
        groups = []
        for membership in memberships:
            group = self.store.get_document_or_none(self.collections["groups"], membership["group_id"])
            if group:
                groups.append(GroupResponse(**group))
        return groups
