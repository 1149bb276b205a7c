import logging
from typing import List, Optional

from app.config.settings import Settings
from app.core.access import GroupAccess
from app.core.exceptions import NotFound, ValidationError, ensure_actor
from app.core.utils import clean, new_document_id, now_iso
from app.database.document_store import DocumentStore
from app.modules.permissions.policy import quote_permissions
from app.modules.quotes.schemas import QuoteResponse

logger = logging.getLogger(__name__)


class QuoteService:
    def __init__(self, store: DocumentStore, settings: Settings):
        self.store = store
        self.settings = settings
        self.collections = settings.collections
        self.access = GroupAccess(store, settings)

    def create_quote(
        self,
        group_id: str,
        person_id: str,
        text: str,
        actor_id: str,
        created_by_name: Optional[str] = None
    ) -> QuoteResponse:
        """Attribute a quote to a person of the group (any member)"""
        ensure_actor(actor_id)
        group_id = clean(group_id)
        person_id = clean(person_id)
        text = clean(text)
        if not group_id or not person_id or not text:
            raise ValidationError("Group, person, and text are required.")

        membership = self.access.require_member(group_id, actor_id)
        person = self.store.get_document(self.collections["people"], person_id)
        if person.get("group_id") != group_id:
            raise NotFound("Person does not belong to this group.")

        roster = self.access.get_roster(group_id)
        quote = self.store.create_document(
            self.collections["quotes"],
            new_document_id(),
            {
                "group_id": group_id,
                "person_id": person_id,
                "text": text,
                "created_at": now_iso(),
                "created_by": actor_id,
                "created_by_name": clean(created_by_name, membership.get("display_name") or "")
            },
            quote_permissions(roster)
        )
        return QuoteResponse(**quote)

    def delete_quote(self, group_id: str, quote_id: str, actor_id: str) -> bool:
        """Delete a quote (admins only)"""
        ensure_actor(actor_id)
        group_id = clean(group_id)
        quote_id = clean(quote_id)
        if not group_id or not quote_id:
            raise ValidationError("Group and quote are required.")
        self.access.require_admin(group_id, actor_id)

        quote = self.store.get_document(self.collections["quotes"], quote_id)
        if quote.get("group_id") != group_id:
            raise NotFound("Quote does not belong to this group.")

        self.store.delete_document(self.collections["quotes"], quote_id)
        logger.info(f"Quote {quote_id} deleted from group {group_id} by {actor_id}")
        return True

    def list_quotes(self, group_id: str, actor_id: str, person_id: Optional[str] = None) -> List[QuoteResponse]:
        """Quotes of a group, newest first, optionally for one person (members only)"""
        ensure_actor(actor_id)
        self.access.require_member(group_id, actor_id)
        filters = {"group_id": group_id}
        if person_id:
            filters["person_id"] = person_id
        quotes = self.store.list_all_documents(self.collections["quotes"], filters, order_by="-created_at")
        return [QuoteResponse(**quote) for quote in quotes]
