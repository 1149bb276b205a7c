"""
Pure functions mapping a group roster to the ACL each document should carry.

An ACL is a list of strings such as 'read("user:abc")' or 'read("users")'.
Two ACLs are equal when they hold the same strings, in any order.
"""

from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence

from app.config.permissions_config import ACTIONS, get_policy

ANY_USER = "users"


class Roster(NamedTuple):
    member_ids: List[str]
    admin_ids: List[str]
    owner_id: Optional[str]

    @classmethod
    def from_memberships(cls, memberships: Iterable[Dict[str, Any]]) -> "Roster":
        memberships = list(memberships)
        member_ids = unique(m.get("user_id") for m in memberships)
        admin_ids = unique(m.get("user_id") for m in memberships if m.get("role") != "member")
        owner = next((m for m in memberships if m.get("role") == "owner"), None)
        # Mid-transfer there can briefly be no owner; fall back to the first admin
        owner_id = owner["user_id"] if owner else (admin_ids[0] if admin_ids else None)
        return cls(member_ids=member_ids, admin_ids=admin_ids, owner_id=owner_id)

    def with_member(self, user_id: str) -> "Roster":
        return self._replace(member_ids=unique([*self.member_ids, user_id]))


def unique(values: Iterable[Optional[str]]) -> List[str]:
    """Drop empty values and duplicates, keeping first-seen order"""
    return list(dict.fromkeys(value for value in values if value))


def user_role(user_id: str) -> str:
    return f"user:{user_id}"


def permission(action: str, role: str) -> str:
    return f'{action}("{role}")'


def build_permissions(action: str, user_ids: Iterable[Optional[str]]) -> List[str]:
    return [permission(action, user_role(user_id)) for user_id in unique(user_ids)]


def normalize_permissions(permissions: Optional[Iterable[str]]) -> List[str]:
    return sorted(set(permissions or []))


def permissions_equal(a: Optional[Iterable[str]], b: Optional[Iterable[str]]) -> bool:
    return normalize_permissions(a) == normalize_permissions(b)


def _resolve_audience(audience: str, roster: Roster, document: Dict[str, Any]) -> Sequence[str]:
    if audience == "members":
        return roster.member_ids
    if audience == "admins":
        return roster.admin_ids
    if audience == "owner":
        return [roster.owner_id] if roster.owner_id else []
    if audience == "self":
        return [document.get("user_id")] if document.get("user_id") else []
    raise ValueError(f"Unknown audience: {audience}")


def required_permissions(kind: str, roster: Roster, document: Optional[Dict[str, Any]] = None) -> List[str]:
    """ACL the given document of `kind` must carry under `roster`"""
    document = document or {}
    rules = get_policy(kind, placeholder=bool(document.get("is_placeholder")))

    permissions: List[str] = []
    for action in ACTIONS:
        audiences = rules[action]
        if "any_user" in audiences:
            permissions.append(permission(action, ANY_USER))
        user_ids: List[str] = []
        for audience in audiences:
            if audience != "any_user":
                user_ids.extend(_resolve_audience(audience, roster, document))
        permissions.extend(build_permissions(action, user_ids))
    return permissions


def group_permissions(roster: Roster) -> List[str]:
    return required_permissions("groups", roster)


def membership_permissions(roster: Roster, membership_user_id: str) -> List[str]:
    return required_permissions("memberships", roster, {"user_id": membership_user_id})


def person_permissions(roster: Roster, is_placeholder: bool) -> List[str]:
    return required_permissions("people", roster, {"is_placeholder": is_placeholder})


def quote_permissions(roster: Roster) -> List[str]:
    return required_permissions("quotes", roster)


def invite_permissions(roster: Roster) -> List[str]:
    return required_permissions("invites", roster)
