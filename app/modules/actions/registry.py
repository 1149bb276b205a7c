"""
Named operations callable through the single /actions endpoint.

Each handler takes (services, actor_id, payload) where payload is the raw
JSON object sent by the client. Keys are snake_case; the camelCase spelling
used by older clients (groupId, membershipId, ...) is accepted as well.
"""

import logging
import random
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

from app.config.settings import Settings
from app.core.exceptions import ValidationError, ensure_actor
from app.database.document_store import DocumentStore
from app.modules.groups.service import GroupService
from app.modules.invites.service import InviteService
from app.modules.memberships.service import MembershipService
from app.modules.people.service import PersonService
from app.modules.permissions.service import PermissionService
from app.modules.quotes.service import QuoteService

logger = logging.getLogger(__name__)


class ActionServices:
    def __init__(self, store: DocumentStore, settings: Settings, rng: Optional[random.Random] = None):
        self.permissions = PermissionService(store, settings)
        self.groups = GroupService(store, settings, rng=rng)
        self.invites = InviteService(store, settings, rng=rng)
        self.memberships = MembershipService(store, settings, permissions=self.permissions)
        self.people = PersonService(store, settings)
        self.quotes = QuoteService(store, settings)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def field(payload: Dict[str, Any], name: str, default: Any = None) -> Any:
    if name in payload:
        return payload[name]
    return payload.get(_camel(name), default)


def flag(payload: Dict[str, Any], name: str) -> bool:
    """Boolean payload value; strings count only when they spell true"""
    value = field(payload, name, False)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return value is True


Handler = Callable[[ActionServices, str, Dict[str, Any]], Any]

ACTIONS: Dict[str, Handler] = {
    "createGroupWithOwner": lambda s, actor, p: s.groups.create_group_with_owner(
        field(p, "name"), actor, field(p, "display_name")
    ),
    "renameGroup": lambda s, actor, p: s.groups.rename_group(
        field(p, "group_id"), field(p, "name"), actor
    ),
    "createInvite": lambda s, actor, p: s.invites.create_invite(
        field(p, "group_id"), actor, field(p, "name")
    ),
    "renameInvite": lambda s, actor, p: s.invites.rename_invite(
        field(p, "invite_id"), field(p, "name"), actor
    ),
    "deleteInvite": lambda s, actor, p: s.invites.delete_invite(field(p, "invite_id"), actor),
    "joinGroupByCode": lambda s, actor, p: s.memberships.join_group_by_code(
        field(p, "code"), actor, field(p, "display_name")
    ),
    "createPlaceholderPerson": lambda s, actor, p: s.people.create_placeholder_person(
        field(p, "group_id"), field(p, "name"), actor
    ),
    "createQuote": lambda s, actor, p: s.quotes.create_quote(
        field(p, "group_id"), field(p, "person_id"), field(p, "text"), actor,
        created_by_name=field(p, "created_by_name")
    ),
    "deleteQuote": lambda s, actor, p: s.quotes.delete_quote(
        field(p, "group_id"), field(p, "quote_id") or field(p, "id"), actor
    ),
    "removePerson": lambda s, actor, p: s.people.remove_person(
        field(p, "group_id"), field(p, "person_id"), actor, force=flag(p, "force")
    ),
    "claimPlaceholder": lambda s, actor, p: s.people.claim_placeholder(
        field(p, "group_id"), field(p, "placeholder_id"), actor
    ),
    "unclaimPlaceholder": lambda s, actor, p: s.people.unclaim_placeholder(field(p, "group_id"), actor),
    "updateMemberRole": lambda s, actor, p: s.memberships.update_member_role(
        field(p, "group_id"), field(p, "membership_id"), field(p, "new_role"), actor
    ),
    "transferOwnership": lambda s, actor, p: s.memberships.transfer_ownership(
        field(p, "group_id"), field(p, "current_owner_membership_id"),
        field(p, "next_owner_membership_id"), actor
    ),
    "removeMember": lambda s, actor, p: s.memberships.remove_member(
        field(p, "group_id"), field(p, "membership_id"), actor
    ),
    "syncGroupPermissions": lambda s, actor, p: s.permissions.sync_group_permissions(
        field(p, "group_id"), actor
    ),
}


def dispatch(services: ActionServices, action: str, actor_id: str, payload: Optional[Dict[str, Any]] = None) -> Any:
    """Run a named action and return a JSON-ready result"""
    handler = ACTIONS.get((action or "").strip())
    if handler is None:
        raise ValidationError("Unknown action.")
    ensure_actor(actor_id)
    if payload is not None and not isinstance(payload, dict):
        raise ValidationError("Payload must be an object.")

    logger.debug(f"Dispatching {action} for {actor_id}")
    result = handler(services, actor_id, payload or {})
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, bool):
        return {"ok": result}
    return result
