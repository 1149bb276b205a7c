import uuid
from datetime import datetime, timezone
from typing import Any


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_document_id() -> str:
    return uuid.uuid4().hex


def derived_document_id(*parts: str) -> str:
    """Stable id for a document that a repeated call must find again instead of recreating"""
    return uuid.uuid5(uuid.NAMESPACE_OID, ":".join(parts)).hex


def clean(value: Any, default: str = "") -> str:
    """Trimmed string form of a payload value; blank values fall back to default"""
    text = str(value if value is not None else "").strip()
    return text or default
