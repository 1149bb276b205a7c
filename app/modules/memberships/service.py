import logging
from typing import Any, Dict, List, Optional

from app.config.settings import Settings
from app.core.access import GroupAccess, ensure_admin, ensure_owner, is_admin
from app.core.exceptions import Forbidden, NotFound, ValidationError, ensure_actor
from app.core.utils import clean, new_document_id, now_iso
from app.database.document_store import DocumentStore
from app.modules.groups.schemas import GroupResponse
from app.modules.invites.codes import normalize_code
from app.modules.memberships.schemas import JoinResponse, MembershipResponse
from app.modules.people.schemas import PersonResponse
from app.modules.permissions.policy import membership_permissions, person_permissions
from app.modules.permissions.service import PermissionService

logger = logging.getLogger(__name__)


class MembershipService:
    """Join, role change, ownership transfer and removal; each ends with a permission sync"""

    def __init__(self, store: DocumentStore, settings: Settings, permissions: Optional[PermissionService] = None):
        self.store = store
        self.settings = settings
        self.collections = settings.collections
        self.access = GroupAccess(store, settings)
        self.permissions = permissions or PermissionService(store, settings)

    def _get_target(self, group_id: str, membership_id: str) -> Dict[str, Any]:
        target = self.store.get_document(self.collections["memberships"], membership_id)
        if target.get("group_id") != group_id:
            raise NotFound("Member does not belong to this group.")
        return target

    def _set_role(self, membership: Dict[str, Any], role: str) -> Dict[str, Any]:
        if membership.get("role") == role:
            return membership
        return self.store.update_document(self.collections["memberships"], membership["id"], {"role": role})

    def list_members(self, group_id: str, actor_id: str) -> List[MembershipResponse]:
        """All memberships of a group ordered by display name (members only)"""
        ensure_actor(actor_id)
        self.access.require_member(group_id, actor_id)
        return [MembershipResponse(**m) for m in self.access.list_group_members(group_id)]

    def join_group_by_code(self, code: str, actor_id: str, display_name: Optional[str] = None) -> JoinResponse:
        """Join the group an invite code belongs to; joining twice returns the existing membership"""
        ensure_actor(actor_id)
        code = normalize_code(code)
        display_name = clean(display_name, "Member")
        if not code:
            raise ValidationError("Invite code is required.")

        invite = self.store.find_document(self.collections["invites"], {"code": code})
        if not invite:
            raise NotFound("Invite code is invalid.")

        group_id = invite["group_id"]
        group_name = invite.get("group_name") or "Group"

        existing = self.access.get_membership_by_user(group_id, actor_id)
        if existing:
            person = None
            if existing.get("person_id"):
                person = self.store.get_document_or_none(self.collections["people"], existing["person_id"])
            return JoinResponse(
                group_id=group_id,
                membership=MembershipResponse(**existing),
                person=PersonResponse(**person) if person else None,
                created=False
            )

        roster = self.access.get_roster(group_id).with_member(actor_id)
        created_at = now_iso()

        # An interrupted earlier join may have left this user's person behind
        person = self.store.find_document(
            self.collections["people"],
            {"group_id": group_id, "user_id": actor_id, "is_placeholder": False}
        )
        if not person:
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
                "group_name": group_name,
                "user_id": actor_id,
                "role": "member",
                "display_name": display_name,
                "person_id": person["id"],
                "claimed_placeholder_id": "",
                "claimed_placeholder_name": "",
                "created_at": created_at
            },
            membership_permissions(roster, actor_id)
        )

        # The new member can't pass the admin check yet
        self.permissions.sync_group_permissions(group_id, actor_id, enforce_admin=False)

        logger.info(f"User {actor_id} joined group {group_id} with invite {invite['id']}")
        return JoinResponse(
            group_id=group_id,
            membership=MembershipResponse(**membership),
            person=PersonResponse(**person),
            created=True
        )

    def update_member_role(self, group_id: str, membership_id: str, new_role: str, actor_id: str) -> MembershipResponse:
        """Promote a member to admin (admins) or demote an admin to member (owner only)"""
        ensure_actor(actor_id)
        group_id = clean(group_id)
        membership_id = clean(membership_id)
        new_role = clean(new_role)
        if not group_id or not membership_id or not new_role:
            raise ValidationError("Group, membership, and role are required.")
        if new_role not in ("admin", "member"):
            raise ValidationError("Invalid role.")

        actor_membership = self.access.require_member(group_id, actor_id, "Membership required.")
        target = self._get_target(group_id, membership_id)
        if target.get("role") == "owner":
            raise Forbidden("Use transfer ownership instead.")

        if new_role == "admin":
            ensure_admin(actor_membership)
        elif actor_membership.get("role") != "owner":
            raise Forbidden("Only the owner can remove admins.")

        updated = self._set_role(target, new_role)
        self.permissions.sync_group_permissions(group_id, actor_id)

        logger.info(f"Membership {membership_id} in group {group_id} set to {new_role} by {actor_id}")
        return MembershipResponse(**updated)

    def transfer_ownership(
        self,
        group_id: str,
        current_owner_membership_id: str,
        next_owner_membership_id: str,
        actor_id: str
    ) -> GroupResponse:
        """Hand ownership to another member; the previous owner stays on as admin"""
        ensure_actor(actor_id)
        group_id = clean(group_id)
        current_owner_membership_id = clean(current_owner_membership_id)
        next_owner_membership_id = clean(next_owner_membership_id)
        if not group_id or not current_owner_membership_id or not next_owner_membership_id:
            raise ValidationError("Group and memberships are required.")

        actor_membership = self.access.require_member(group_id, actor_id, "Owner permissions required.")
        group = self.store.get_document(self.collections["groups"], group_id)

        current_owner = self.store.get_document(self.collections["memberships"], current_owner_membership_id)
        next_owner = self.store.get_document(self.collections["memberships"], next_owner_membership_id)
        if current_owner.get("group_id") != group_id or next_owner.get("group_id") != group_id:
            raise NotFound("Memberships must belong to this group.")
        if current_owner["id"] != actor_membership["id"]:
            raise Forbidden("Only the current owner can transfer ownership.")
        if current_owner["id"] == next_owner["id"]:
            raise ValidationError("Choose another member as the next owner.")

        # A transfer that stopped after demoting the old owner is finished by the same caller
        resuming = actor_membership.get("role") == "admin" and group.get("owner_id") == next_owner["user_id"]
        if not resuming:
            ensure_owner(actor_membership)

        if group.get("owner_id") != next_owner["user_id"]:
            group = self.store.update_document(
                self.collections["groups"], group_id, {"owner_id": next_owner["user_id"]}
            )
        self._set_role(current_owner, "admin")
        self._set_role(next_owner, "owner")

        self.permissions.sync_group_permissions(group_id, actor_id)

        logger.info(f"Ownership of group {group_id} transferred from {current_owner['user_id']} to {next_owner['user_id']}")
        return GroupResponse(**group)

    def remove_member(self, group_id: str, membership_id: str, actor_id: str) -> bool:
        """Remove a member, or leave the group when the target is the actor"""
        ensure_actor(actor_id)
        group_id = clean(group_id)
        membership_id = clean(membership_id)
        if not group_id or not membership_id:
            raise ValidationError("Group and membership are required.")

        actor_membership = self.access.require_member(group_id, actor_id, "Membership required.")
        target = self._get_target(group_id, membership_id)

        is_self = target.get("user_id") == actor_membership.get("user_id")
        if is_self:
            if target.get("role") == "owner":
                raise Forbidden("Transfer ownership before leaving the group.")
        else:
            if not is_admin(actor_membership):
                raise Forbidden("Admin permissions required to remove another member.")
            if target.get("role") == "owner":
                raise Forbidden("Transfer ownership before removing the owner.")
            if target.get("role") == "admin" and actor_membership.get("role") != "owner":
                raise Forbidden("Only the owner can remove another admin.")

        if target.get("person_id"):
            self._release_person(group_id, target["person_id"])

        self.store.delete_document(self.collections["memberships"], membership_id)

        # After leaving, the actor can no longer pass the admin check
        self.permissions.sync_group_permissions(group_id, actor_id, enforce_admin=not is_self)

        if is_self:
            logger.info(f"User {actor_id} left group {group_id}")
        else:
            logger.info(f"Membership {membership_id} removed from group {group_id} by {actor_id}")
        return True

    def _release_person(self, group_id: str, person_id: str) -> None:
        """Keep a person with quotes as an orphaned placeholder, delete it otherwise"""
        person = self.store.get_document_or_none(self.collections["people"], person_id)
        if not person:
            return
        has_quotes = self.store.find_document(
            self.collections["quotes"], {"group_id": group_id, "person_id": person_id}
        ) is not None
        if has_quotes:
            self.store.update_document(
                self.collections["people"], person_id, {"user_id": "", "is_placeholder": True}
            )
        else:
            self.store.delete_document(self.collections["people"], person_id)
