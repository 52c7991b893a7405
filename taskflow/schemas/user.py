# taskflow/schemas/user.py
from pydantic import EmailStr, Field, StringConstraints, field_validator
from typing import Annotated, Literal, Optional
from datetime import datetime

from taskflow.schemas.envelope import CamelModel

Role = Literal["user", "admin"]
FullName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]

class UserBase(CamelModel):
    email: EmailStr
    full_name: FullName

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

class UserCreate(UserBase):
    # No role field: admins are only created through the admin routes.
    password: str = Field(min_length=1)

class AdminCreate(UserBase):
    password: str = Field(min_length=1)

class LoginRequest(CamelModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()

class UserUpdate(CamelModel):
    full_name: Optional[FullName] = None
    role: Optional[Role] = None

    @field_validator("full_name", "role")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

class User(CamelModel):
    id: int
    email: str
    full_name: str
    role: Role
    created_at: datetime

class AuthData(CamelModel):
    token: str
    role: Role
    user_id: int
    full_name: str

class UserStats(CamelModel):
    total_users: int
    total_admins: int
    total_all_users: int
