"""Bearer token verification.

Tokens are issued by the authentication collaborator; this service only
verifies them and reads the username claim.
"""

import logging
from typing import Any, Dict

from jose import JWTError, jwt

from ..config.settings import InventorySettings
from ..core.exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)


def decode_token(token: str, settings: InventorySettings) -> Dict[str, Any]:
    if settings.jwt_public_key is None:
        raise ConfigurationError("JWT verification key is not configured")

    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        return jwt.decode(
            token,
            settings.jwt_public_key.get_secret_value(),
            algorithms=settings.jwt_algorithms,
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise AuthenticationError("Invalid or expired token")


def username_from_token(token: str, settings: InventorySettings) -> str:
    """Username of the token, from the configured claim or ``sub``."""
    claims = decode_token(token, settings)
    username = claims.get(settings.jwt_username_claim) or claims.get("sub")
    if not username:
        raise AuthenticationError("Token does not carry a username")
    return str(username)
