"""API schemas"""
from pydantic import BaseModel, field_validator
from typing import Dict, List, Optional, Any

from shared.enums import UserRole, View

# User schemas
class User(BaseModel):
    id: Optional[int] = None
    username: str
    email: Optional[str] = None
    role: UserRole = UserRole.USER
    created_at: Optional[str] = None  # Server-provided, display only
    updated_at: Optional[str] = None

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("username must not be empty")
        return v

    @field_validator("role", mode="before")
    @classmethod
    def default_role(cls, v):
        return UserRole.USER if v is None or v == "" else v

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

class EditDraft(BaseModel):
    """In-memory shadow of a user row being edited"""
    user_id: int
    username: str = ""
    email: str = ""
    password: str = ""  # Blank means unchanged
    role: UserRole = UserRole.USER

# Request schemas
class LoginRequest(BaseModel):
    username: str
    password: str

class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str

class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRole] = None

# Response schemas
class HealthStatus(BaseModel):
    status: str
    database: str = "unknown"

class LoginResponse(BaseModel):
    success: bool
    user: Optional[Dict[str, Any]] = None

class UsersResponse(BaseModel):
    success: bool
    users: List[User] = []

class ActionResponse(BaseModel):
    success: bool
    message: Optional[str] = None

# Application layer result
class ActionResult(BaseModel):
    success: bool
    message: Optional[str] = None
    view: Optional[View] = None
    data: Optional[Any] = None
