"""Invite code generation with bounded retry on collision"""

import random
import logging
from typing import Any, Dict, List, Optional

from app.config.settings import Settings
from app.core.exceptions import Conflict
from app.core.utils import clean, new_document_id, now_iso
from app.database.document_store import DocumentStore
from app.modules.permissions.policy import Roster, invite_permissions

logger = logging.getLogger(__name__)

# No I, O, 0 or 1: codes are typed in by hand
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def _default_rng() -> random.Random:
    rng = random.SystemRandom()
    try:
        rng.random()
    except NotImplementedError:
        logger.warning("OS randomness unavailable, invite codes fall back to random.Random")
        return random.Random()
    return rng


def normalize_code(code: Any) -> str:
    return clean(code).upper()


class InviteCodeGenerator:
    def __init__(self, store: DocumentStore, settings: Settings, rng: Optional[random.Random] = None):
        self.store = store
        self.settings = settings
        self.collection = settings.collection_invites
        self.rng = rng or _default_rng()

    def random_code(self) -> str:
        return "".join(self.rng.choice(CODE_ALPHABET) for _ in range(self.settings.invite_code_length))

    def code_exists(self, code: str) -> bool:
        return self.store.find_document(self.collection, {"code": code}) is not None

    def generate(
        self,
        group_id: str,
        group_name: str,
        created_by: str,
        admin_ids: List[str],
        label: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create an invite document under a code no other invite uses"""
        name = clean(label, self.settings.default_invite_name)
        attempts = self.settings.invite_code_max_attempts

        for attempt in range(1, attempts + 1):
            code = self.random_code()
            if self.code_exists(code):
                logger.warning(f"Invite code collision on attempt {attempt}/{attempts}")
                continue
            try:
                return self.store.create_document(
                    self.collection,
                    new_document_id(),
                    {
                        "group_id": group_id,
                        "group_name": group_name,
                        "name": name,
                        "code": code,
                        "created_at": now_iso(),
                        "created_by": created_by
                    },
                    invite_permissions(Roster(member_ids=[], admin_ids=list(admin_ids), owner_id=None))
                )
            except Conflict:
                # Taken by a concurrent insert after the lookup; the unique index on code caught it
                logger.warning(f"Invite code taken during insert on attempt {attempt}/{attempts}")
                continue

        raise Conflict("Could not generate a unique invite code.")
