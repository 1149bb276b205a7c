from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class PlaceholderCreate(BaseModel):
    name: str


class PersonResponse(BaseModel):
    id: str
    group_id: str
    name: str
    user_id: Optional[str] = ""
    is_placeholder: bool
    created_at: datetime
    created_by: str

    class Config:
        from_attributes = True


class ClaimRequest(BaseModel):
    placeholder_id: str


class ClaimResponse(BaseModel):
    membership_id: str
    placeholder_id: str
    placeholder_name: str
    quotes_moved: int


class UnclaimResponse(BaseModel):
    membership_id: str
    placeholder: PersonResponse
    quotes_moved: int
