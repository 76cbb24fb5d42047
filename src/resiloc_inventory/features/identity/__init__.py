"""Identity feature: flid cipher and caller role resolution."""

from .services import SELECTED_COMMUNITY, IdentityService
from .utils import FlidCipher

__all__ = ["SELECTED_COMMUNITY", "IdentityService", "FlidCipher"]
