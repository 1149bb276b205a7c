"""
Document Permissions Configuration
This config defines the access matrix for every document kind the API manages.
Each action maps to the audiences allowed to perform it; audiences are resolved
against the group roster by app.modules.permissions.policy.

Audiences:
    members   - every user holding a membership in the group
    admins    - every user whose role is admin or owner
    owner     - the single owner of the group
    self      - the user the document belongs to (memberships only)
    any_user  - any authenticated user, member or not
"""

ACTIONS = ["read", "update", "delete"]

AUDIENCES = ["members", "admins", "owner", "self", "any_user"]

# Document kinds and their access rules
DOCUMENT_POLICIES = {
    "groups": {
        "read": ["members"],
        "update": ["admins"],
        "delete": ["owner"],
        "description": "Group workspace"
    },
    "memberships": {
        "read": ["members"],
        "update": ["admins", "self"],
        "delete": ["admins", "self"],
        "description": "Membership of a user in a group"
    },
    "people": {
        "read": ["members"],
        "update": ["members"],
        "delete": ["admins"],
        "description": "Quote subject, real member or placeholder"
    },
    "quotes": {
        "read": ["members"],
        "update": ["members"],
        "delete": ["admins"],
        "description": "Attributed quote"
    },
    "invites": {
        # Readable before joining so an outsider can resolve a code
        "read": ["any_user"],
        "update": ["admins"],
        "delete": ["admins"],
        "description": "Invite code for joining a group"
    }
}

# Rules that replace the defaults for placeholder people
PLACEHOLDER_OVERRIDES = {
    "people": {
        "delete": ["members"]
    }
}


def get_policy(kind: str, placeholder: bool = False) -> dict:
    """
    Returns the effective rules for a document kind
    Format: {"read": [...], "update": [...], "delete": [...]}
    """
    if kind not in DOCUMENT_POLICIES:
        raise KeyError(f"Unknown document kind: {kind}")

    rules = {action: list(DOCUMENT_POLICIES[kind][action]) for action in ACTIONS}
    if placeholder:
        for action, audiences in PLACEHOLDER_OVERRIDES.get(kind, {}).items():
            rules[action] = list(audiences)
    return rules


def get_permission_matrix():
    """Flattened view of the policy table, one row per (kind, action)"""
    rows = []
    for kind, policy in DOCUMENT_POLICIES.items():
        for action in ACTIONS:
            rows.append({
                "kind": kind,
                "action": action,
                "audiences": list(policy[action]),
                "placeholder_audiences": list(PLACEHOLDER_OVERRIDES.get(kind, {}).get(action, policy[action])),
                "description": policy["description"]
            })
    return rows


PERMISSION_MATRIX = get_permission_matrix()
