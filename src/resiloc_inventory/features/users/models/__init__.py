"""Request models for users."""

from .requests import ChangePasswordRequest, CreateUserRequest, UpdateUserRequest, UserRolesRequest

__all__ = ["ChangePasswordRequest", "CreateUserRequest", "UpdateUserRequest", "UserRolesRequest"]
