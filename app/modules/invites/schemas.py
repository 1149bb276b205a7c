from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class InviteCreate(BaseModel):
    name: Optional[str] = None


class InviteRename(BaseModel):
    name: str


class InviteResponse(BaseModel):
    id: str
    group_id: str
    group_name: str
    name: Optional[str] = None
    code: str
    created_at: datetime
    created_by: str

    class Config:
        from_attributes = True


class InviteLookupResponse(BaseModel):
    """What an outsider sees when resolving a code"""
    id: str
    group_id: str
    group_name: str
    name: Optional[str] = None
    code: str
