"""User request models."""

from typing import List, Optional

from pydantic import Field

from ....core.models import RequestModel
from ..entities.user import UserRole


class CreateUserRequest(RequestModel):
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    first_name: str = ""
    last_name: str = ""
    phone: str = ""


class UpdateUserRequest(RequestModel):
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class ChangePasswordRequest(RequestModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class UserRolesRequest(RequestModel):
    community_id: str = Field(..., description="Community id, or the selected sentinel with a flid header")
    user_roles: List[UserRole] = Field(..., min_length=1)
