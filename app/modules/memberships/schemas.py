from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime

from app.modules.people.schemas import PersonResponse


class MembershipResponse(BaseModel):
    id: str
    group_id: str
    group_name: Optional[str] = None
    user_id: str
    role: str
    display_name: str
    person_id: Optional[str] = None
    claimed_placeholder_id: Optional[str] = None
    claimed_placeholder_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class JoinRequest(BaseModel):
    code: str
    display_name: Optional[str] = None


class JoinResponse(BaseModel):
    group_id: str
    membership: MembershipResponse
    person: Optional[PersonResponse] = None
    created: bool  # False when the user was already a member


class RoleUpdate(BaseModel):
    new_role: Literal["admin", "member"]


class OwnershipTransfer(BaseModel):
    current_owner_membership_id: str
    next_owner_membership_id: str
