"""User API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from devcamper.schemas.auth import Role


class User(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    created_at: datetime


class CreateUserRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    role: Role = Role.USER


class UpdateUserRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=3, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    role: Role | None = None
