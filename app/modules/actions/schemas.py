from pydantic import BaseModel
from typing import Any, Dict


class ActionRequest(BaseModel):
    action: str
    payload: Dict[str, Any] = {}


class ActionResponse(BaseModel):
    ok: bool = True
    data: Any = None
