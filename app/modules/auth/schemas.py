from pydantic import BaseModel
from typing import List, Optional

from app.modules.memberships.schemas import MembershipResponse


class CurrentUserResponse(BaseModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = ""
    memberships: List[MembershipResponse]
