from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from models.common import PyObjectId, new_object_id
from datetime import datetime

from core.time_utils import get_current_time

class User(BaseModel):
    id: Optional[PyObjectId] = Field(default_factory=new_object_id, alias="_id")
    full_name: str = "Habit Builder"
    username: str
    email: EmailStr
    hashed_password: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=get_current_time)

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True

class UserPublic(BaseModel):
    id: PyObjectId = Field(alias="_id")
    full_name: str
    username: str
    email: EmailStr
    is_active: bool

    class Config:
        populate_by_name = True
