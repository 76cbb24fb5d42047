"""Identity utilities."""

from .flid_cipher import FlidCipher

__all__ = ["FlidCipher"]
