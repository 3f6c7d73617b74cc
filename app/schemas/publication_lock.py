from pydantic import BaseModel
from typing import Optional


class LockRequest(BaseModel):
    force: bool = False


class LockOut(BaseModel):
    publication_id: int
    user_id: int
    user_name: Optional[str] = None
    avatar: Optional[str] = None
    expires_at: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
