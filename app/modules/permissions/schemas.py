from pydantic import BaseModel
from typing import List, Optional


class SyncRequest(BaseModel):
    group_id: str


class SyncResult(BaseModel):
    member_ids: List[str]
    admin_ids: List[str]
    owner_id: Optional[str] = None
    updated: int = 0  # ACL writes issued by this run


class PolicyRow(BaseModel):
    kind: str
    action: str
    audiences: List[str]
    placeholder_audiences: List[str]
    description: str
