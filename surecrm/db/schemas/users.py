import uuid
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from surecrm.utils.roles import RoleEnum


class UserBase(BaseModel):
    email: str
    full_name: str | None = None
    phone: str | None = None
    company: str | None = None


class UserCreate(UserBase):
    role: RoleEnum = RoleEnum.agent


class User(UserBase):
    id: uuid.UUID
    role: str
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    model_config = ConfigDict(from_attributes=True)
