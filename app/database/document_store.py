"""
Document store used by the services.

Every managed table carries a `permissions` text[] column holding the
document's ACL (e.g. 'read("user:<id>")'). Row level security policies in
the database check auth.uid() against that column, so the column is the only
authorization state; the services keep it in sync with the group roster.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, List, NamedTuple, Optional
import logging

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from app.core.exceptions import Conflict, NotFound, QuotesError, Transient

logger = logging.getLogger(__name__)

# Postgres / PostgREST error codes
UNIQUE_VIOLATION = "23505"
NO_ROWS = "PGRST116"


class DocumentPage(NamedTuple):
    documents: List[Dict[str, Any]]
    total: int


class DocumentStore(ABC):
    """Minimal CRUD surface over id-keyed documents carrying an ACL."""

    page_size: int = 100

    @abstractmethod
    def list_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
        order_by: Optional[str] = None
    ) -> DocumentPage:
        """Equality filters only. order_by takes a column, prefixed with '-' for descending."""

    @abstractmethod
    def get_document(self, collection: str, document_id: str) -> Dict[str, Any]:
        """Raises NotFound when absent"""

    @abstractmethod
    def create_document(
        self,
        collection: str,
        document_id: str,
        fields: Dict[str, Any],
        permissions: List[str]
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    def update_document(
        self,
        collection: str,
        document_id: str,
        fields: Optional[Dict[str, Any]] = None,
        permissions: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Only the given fields are written; permissions=None leaves the ACL untouched."""

    @abstractmethod
    def delete_document(self, collection: str, document_id: str) -> None:
        pass

    def find_document(self, collection: str, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """First document matching filters, or None"""
        page = self.list_documents(collection, filters, limit=1)
        return page.documents[0] if page.documents else None

    def get_document_or_none(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.get_document(collection, document_id)
        except NotFound:
            return None

    def list_all_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Load every matching document, page by page until a short page comes back"""
        documents: List[Dict[str, Any]] = []
        offset = 0
        while True:
            page = self.list_documents(
                collection, filters, limit=self.page_size, offset=offset, order_by=order_by
            )
            documents.extend(page.documents)
            if len(page.documents) < self.page_size:
                break
            offset += self.page_size
        return documents


class SupabaseDocumentStore(DocumentStore):
    def __init__(self, supabase: Client, page_size: int = 100):
        self.supabase = supabase
        self.page_size = page_size

    @contextmanager
    def _translate_errors(self, operation: str, collection: str, document_id: Optional[str] = None):
        target = f"{collection}/{document_id}" if document_id else collection
        try:
            yield
        except QuotesError:
            raise
        except APIError as e:
            code = str(getattr(e, "code", "") or "")
            if code == UNIQUE_VIOLATION:
                raise Conflict(f"{operation} {target} failed: document already exists") from e
            if code == NO_ROWS:
                raise NotFound(f"Document {target} not found") from e
            logger.error(f"Store error during {operation} {target}: {e}")
            raise Transient(f"{operation} {target} failed: {getattr(e, 'message', None) or e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Store unavailable during {operation} {target}: {e}")
            raise Transient(f"{operation} {target} failed: store unavailable") from e

    def list_documents(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
        order_by: Optional[str] = None
    ) -> DocumentPage:
        with self._translate_errors("list", collection):
            query = self.supabase.table(collection).select("*", count="exact")
            for column, value in (filters or {}).items():
                query = query.eq(column, value)
            if order_by:
                query = query.order(order_by.lstrip("-"), desc=order_by.startswith("-"))
            result = query.range(offset, offset + limit - 1).execute()
            documents = result.data or []
            total = result.count if result.count is not None else len(documents)
            return DocumentPage(documents=documents, total=total)

    def get_document(self, collection: str, document_id: str) -> Dict[str, Any]:
        with self._translate_errors("get", collection, document_id):
            result = self.supabase.table(collection)\
                .select("*")\
                .eq("id", document_id)\
                .limit(1)\
                .execute()
            if not result.data:
                raise NotFound(f"Document {collection}/{document_id} not found")
            return result.data[0]

    def create_document(
        self,
        collection: str,
        document_id: str,
        fields: Dict[str, Any],
        permissions: List[str]
    ) -> Dict[str, Any]:
        with self._translate_errors("create", collection, document_id):
            result = self.supabase.table(collection).insert({
                **fields,
                "id": document_id,
                "permissions": sorted(set(permissions))
            }).execute()
            if not result.data:
                raise Transient(f"create {collection}/{document_id} failed: no row returned")
            return result.data[0]

    def update_document(
        self,
        collection: str,
        document_id: str,
        fields: Optional[Dict[str, Any]] = None,
        permissions: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        update_data = dict(fields or {})
        if permissions is not None:
            update_data["permissions"] = sorted(set(permissions))
        if not update_data:
            return self.get_document(collection, document_id)

        with self._translate_errors("update", collection, document_id):
            result = self.supabase.table(collection)\
                .update(update_data)\
                .eq("id", document_id)\
                .execute()
            if not result.data:
                raise NotFound(f"Document {collection}/{document_id} not found")
            return result.data[0]

    def delete_document(self, collection: str, document_id: str) -> None:
        with self._translate_errors("delete", collection, document_id):
            result = self.supabase.table(collection)\
                .delete()\
                .eq("id", document_id)\
                .execute()
            if not result.data:
                raise NotFound(f"Document {collection}/{document_id} not found")
