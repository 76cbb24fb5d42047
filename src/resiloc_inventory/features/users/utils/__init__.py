"""User utilities."""

from .password import PwdlibPasswordHasher

__all__ = ["PwdlibPasswordHasher"]
