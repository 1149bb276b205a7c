import logging
from typing import Any, Dict, List, Optional, Set

from app.config.settings import Settings
from app.core.access import GroupAccess
from app.core.exceptions import Conflict, Forbidden, NotFound, ValidationError, ensure_actor, step
from app.core.utils import clean, derived_document_id, new_document_id, now_iso
from app.database.document_store import DocumentStore
from app.modules.people.schemas import ClaimResponse, PersonResponse, UnclaimResponse
from app.modules.permissions.policy import person_permissions

logger = logging.getLogger(__name__)


class PersonService:
    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings
        self.collections = settings.collections
        self.access = GroupAccess(store, settings)

    def _get_group_person(self, group_id: str, person_id: str) -> Dict[str, Any]:
        person = self.store.get_document(self.collections["people"], person_id)
        if person.get("group_id") != group_id:
            raise NotFound("Person does not belong to this group.")
        return person

    def _create_placeholder(
        self,
        group_id: str,
        name: str,
        actor_id: str,
        document_id: Optional[str] = None
    ) -> Dict[str, Any]:
        roster = self.access.get_roster(group_id)
        return self.store.create_document(
            self.collections["people"],
            document_id or new_document_id(),
            {
                "group_id": group_id,
                "name": name,
                "user_id": "",
                "is_placeholder": True,
                "created_at": now_iso(),
                "created_by": actor_id
            },
            person_permissions(roster, is_placeholder=True)
        )

    def list_people(self, group_id: str, actor_id: str) -> List[PersonResponse]:
        ensure_actor(actor_id)
        self.access.require_member(group_id, actor_id)
        people = self.store.list_all_documents(self.collections["people"], {"group_id": group_id}, order_by="name")
        return [PersonResponse(**person) for person in people]

    def list_claimable_placeholders(self, group_id: str, actor_id: str) -> List[PersonResponse]:
        """Placeholders created before the actor joined; the ones offered for claiming"""
        ensure_actor(actor_id)
        membership = self.access.require_member(group_id, actor_id)
        if membership.get("claimed_placeholder_id"):
            return []
        joined_at = membership.get("created_at") or ""
        taken = self._claimed_by_others(group_id, membership["id"])
        placeholders = self.store.list_all_documents(
            self.collections["people"], {"group_id": group_id, "is_placeholder": True}, order_by="name"
        )
        return [
            PersonResponse(**person) for person in placeholders
            if (person.get("created_at") or "") < joined_at and person["id"] not in taken
        ]

    def create_placeholder_person(self, group_id: str, name: str, actor_id: str) -> PersonResponse:
        """Create a placeholder person (any member)"""
        ensure_actor(actor_id)
        group_id = clean(group_id)
        name = clean(name)
        if not group_id or not name:
            raise ValidationError("Group and name are required.")
        self.access.require_member(group_id, actor_id)

        person = self._create_placeholder(group_id, name, actor_id)
        logger.info(f"Placeholder {person['id']} created in group {group_id} by {actor_id}")
        return PersonResponse(**person)

    def remove_person(self, group_id: str, person_id: str, actor_id: str, force: bool = False) -> bool:
        """Delete a placeholder (admins only); one with quotes needs force, which deletes the quotes too"""
        ensure_actor(actor_id)
        group_id = clean(group_id)
        person_id = clean(person_id)
        if not group_id or not person_id:
            raise ValidationError("Group and person are required.")
        self.access.require_admin(group_id, actor_id)

        person = self._get_group_person(group_id, person_id)
        if not person.get("is_placeholder"):
            raise Forbidden("Only placeholders can be removed here.")

        quotes = self.store.list_all_documents(
            self.collections["quotes"], {"group_id": group_id, "person_id": person_id}
        )
        if quotes and not force:
            raise Conflict("Placeholder has quotes. Confirm removal to delete them.")

        with step(f"Removing placeholder {person_id}"):
            for quote in quotes:
                self.store.delete_document(self.collections["quotes"], quote["id"])
            self.store.delete_document(self.collections["people"], person_id)

        logger.info(f"Placeholder {person_id} removed from group {group_id} by {actor_id} ({len(quotes)} quote(s) deleted)")
        return True

    def claim_placeholder(self, group_id: str, placeholder_id: str, actor_id: str) -> ClaimResponse:
        """
        Take over a placeholder: its quotes move to the actor's person, tagged with
        the placeholder id, and the placeholder is deleted.

        The claim is recorded on the membership before the placeholder is deleted, so
        a call that failed on the final delete can be repeated to finish the job.
        """
        ensure_actor(actor_id)
        group_id = clean(group_id)
        placeholder_id = clean(placeholder_id)
        if not group_id or not placeholder_id:
            raise ValidationError("Group and placeholder are required.")

        membership = self.access.require_member(group_id, actor_id, "Membership required.")
        if not membership.get("person_id"):
            raise ValidationError("Missing member profile for claim.")

        claimed_id = membership.get("claimed_placeholder_id")
        resuming = claimed_id == placeholder_id
        if claimed_id and not resuming:
            raise Conflict("You have already claimed a placeholder.")

        placeholder = self.store.get_document_or_none(self.collections["people"], placeholder_id)
        if resuming and placeholder is None:
            return ClaimResponse(
                membership_id=membership["id"],
                placeholder_id=placeholder_id,
                placeholder_name=membership.get("claimed_placeholder_name") or "",
                quotes_moved=0
            )
        if placeholder is None or placeholder.get("group_id") != group_id or not placeholder.get("is_placeholder"):
            raise Forbidden("That placeholder cannot be claimed.")
        if placeholder_id in self._claimed_by_others(group_id, membership["id"]):
            raise Conflict("That placeholder has already been claimed.")

        with step(f"Moving quotes of placeholder {placeholder_id}"):
            moved = self._move_quotes(
                {"group_id": group_id, "person_id": placeholder_id},
                {"person_id": membership["person_id"], "source_placeholder_id": placeholder_id}
            )

        if not resuming:
            with step("Recording claim"):
                self.store.update_document(
                    self.collections["memberships"],
                    membership["id"],
                    {"claimed_placeholder_id": placeholder_id, "claimed_placeholder_name": placeholder["name"]}
                )

        with step(f"Deleting placeholder {placeholder_id}"):
            self.store.delete_document(self.collections["people"], placeholder_id)

        logger.info(f"User {actor_id} claimed placeholder {placeholder_id} in group {group_id} ({moved} quote(s))")
        return ClaimResponse(
            membership_id=membership["id"],
            placeholder_id=placeholder_id,
            placeholder_name=placeholder["name"],
            quotes_moved=moved
        )

    def unclaim_placeholder(self, group_id: str, actor_id: str) -> UnclaimResponse:
        """
        Undo a claim: a new placeholder with the claimed name takes back every quote
        tagged with the original placeholder id, then the claim is cleared.

        The original placeholder id is not reused. The new placeholder's id is derived
        from the membership and the claim, so a repeated call after a failure finds it
        again rather than creating a second one.
        """
        ensure_actor(actor_id)
        group_id = clean(group_id)
        if not group_id:
            raise ValidationError("Group is required.")

        membership = self.access.require_member(group_id, actor_id, "Membership required.")
        if not membership.get("person_id"):
            raise ValidationError("Missing member profile for unclaim.")
        claimed_id = membership.get("claimed_placeholder_id")
        if not claimed_id:
            raise Conflict("No placeholder claimed yet.")

        quotes = self.store.list_all_documents(
            self.collections["quotes"], {"group_id": group_id, "source_placeholder_id": claimed_id}
        )

        # Same id on every attempt of this unclaim, so a retry picks up the placeholder it made
        replacement_id = derived_document_id(membership["id"], claimed_id)
        placeholder = self.store.get_document_or_none(self.collections["people"], replacement_id)
        if placeholder is None:
            name = membership.get("claimed_placeholder_name") or "Placeholder"
            with step("Creating replacement placeholder"):
                placeholder = self._create_placeholder(group_id, name, actor_id, document_id=replacement_id)

        with step(f"Moving quotes to placeholder {placeholder['id']}"):
            moved = 0
            for quote in quotes:
                if quote.get("person_id") == placeholder["id"]:
                    continue
                self.store.update_document(self.collections["quotes"], quote["id"], {"person_id": placeholder["id"]})
                moved += 1

        with step("Clearing claim"):
            self.store.update_document(
                self.collections["memberships"],
                membership["id"],
                {"claimed_placeholder_id": "", "claimed_placeholder_name": ""}
            )

        logger.info(f"User {actor_id} unclaimed placeholder {claimed_id} in group {group_id}, quotes now on {placeholder['id']}")
        return UnclaimResponse(
            membership_id=membership["id"],
            placeholder=PersonResponse(**placeholder),
            quotes_moved=moved
        )

    def _claimed_by_others(self, group_id: str, membership_id: str) -> Set[str]:
        """Placeholder ids claimed by other memberships; a claim interrupted before its delete leaves one behind"""
        return {
            m.get("claimed_placeholder_id") for m in self.access.list_group_members(group_id)
            if m.get("claimed_placeholder_id") and m["id"] != membership_id
        }

    def _move_quotes(self, filters: Dict[str, Any], fields: Dict[str, Any]) -> int:
        quotes = self.store.list_all_documents(self.collections["quotes"], filters)
        for quote in quotes:
            self.store.update_document(self.collections["quotes"], quote["id"], fields)
        return len(quotes)
