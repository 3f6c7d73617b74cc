from pydantic import BaseModel, Field
from typing import Optional


class UserEventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: str = Field(min_length=1)
    end_date: Optional[str] = None
    remind_at: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=20)
    is_public: bool = False


class UserEventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    remind_at: Optional[str] = None
    color: Optional[str] = Field(default=None, max_length=20)
    is_public: Optional[bool] = None
