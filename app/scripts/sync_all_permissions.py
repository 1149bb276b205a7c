"""
Sync Permissions Script
Reconciles the document ACLs of every group against its current roster.
Can be run manually or as part of a nightly job; groups already in sync cost
reads only.
"""

import sys
from pathlib import Path
from typing import Optional, Tuple

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config.settings import Settings, get_settings
from app.core.exceptions import QuotesError
from app.database.document_store import DocumentStore, SupabaseDocumentStore
from app.database.supabase_client import get_service_supabase
from app.modules.permissions.service import PermissionService
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system:permission-sync"


def sync_all_groups(store: DocumentStore, settings: Settings) -> Tuple[int, int, int]:
    """Sync every group; returns (groups synced, documents updated, groups failed)"""
    service = PermissionService(store, settings)
    groups = store.list_all_documents(settings.collection_groups, order_by="created_at")
    logger.info(f"Syncing permissions for {len(groups)} group(s)...")

    synced = 0
    updated = 0
    failed = 0
    for group in groups:
        try:
            result = service.sync_group_permissions(group["id"], SYSTEM_ACTOR, enforce_admin=False)
            synced += 1
            updated += result.updated
            if result.updated:
                logger.debug(f"Group {group['id']}: {result.updated} document(s) updated")
        except QuotesError as e:
            # The next run resumes this group
            failed += 1
            logger.error(f"Error syncing group {group['id']}: {e.detail}")

    logger.info(f"Permissions synced: {synced} group(s), {updated} document(s) updated, {failed} failed")
    return synced, updated, failed


def main(store: Optional[DocumentStore] = None):
    """Main function to sync permissions of all groups"""
    settings = get_settings()
    store = store or SupabaseDocumentStore(get_service_supabase(), page_size=settings.page_size)

    _, _, failed = sync_all_groups(store, settings)
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
