from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class QuoteCreate(BaseModel):
    person_id: str
    text: str
    created_by_name: Optional[str] = None


class QuoteResponse(BaseModel):
    id: str
    group_id: str
    person_id: str
    text: str
    created_at: datetime
    created_by: str
    created_by_name: Optional[str] = ""
    source_placeholder_id: Optional[str] = None

    class Config:
        from_attributes = True
