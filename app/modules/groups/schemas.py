from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.modules.invites.schemas import InviteResponse
from app.modules.memberships.schemas import MembershipResponse
from app.modules.people.schemas import PersonResponse


class GroupCreate(BaseModel):
    name: str
    display_name: Optional[str] = None


class GroupUpdate(BaseModel):
    name: str


class GroupResponse(BaseModel):
    id: str
    name: str
    owner_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class GroupWithOwnerResponse(BaseModel):
    group: GroupResponse
    membership: MembershipResponse
    person: PersonResponse
    invite: InviteResponse
