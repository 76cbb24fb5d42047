"""FastAPI dependencies: settings, services, the caller and request options."""

from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from fastapi import Depends, Query, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config.settings import InventorySettings
from ..core.exceptions import AuthenticationError, ForbiddenError
from ..features.pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse, SortOrder
from ..features.users.entities.user import UserRole
from .security import username_from_token

if TYPE_CHECKING:
    from .container import ServiceContainer

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> InventorySettings:
    return request.app.state.settings


def get_container(request: Request) -> "ServiceContainer":
    return request.app.state.container


async def get_current_username(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: InventorySettings = Depends(get_app_settings),
) -> str:
    """Username carried by the verified bearer token."""
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    return username_from_token(credentials.credentials, settings)


async def require_admin(
    username: str = Depends(get_current_username),
    container=Depends(get_container),
) -> str:
    if not await container.identity.is_admin(username):
        raise ForbiddenError()
    return username


def get_flid(request: Request, settings: InventorySettings = Depends(get_app_settings)) -> Optional[str]:
    """Encoded community id of the caller's current context, if any."""
    return request.headers.get(settings.community_header_name) or None


def require_roles(*roles: UserRole) -> Callable[..., Awaitable[str]]:
    """Dependency admitting admins and callers holding one of ``roles`` in the flid community."""
    allowed = frozenset(roles)

    async def dependency(
        username: str = Depends(get_current_username),
        flid: Optional[str] = Depends(get_flid),
        container=Depends(get_container),
    ) -> str:
        held = await container.identity.get_user_roles_by_flid(username, flid)
        if UserRole.ADMIN in held or allowed.intersection(held):
            return username
        raise ForbiddenError()

    return dependency


def get_pagination(
    page: Optional[int] = Query(None, description="Page number (blank: 1st page)"),
    limit: Optional[int] = Query(None, description="Items per page (blank or 0: all items)"),
    settings: InventorySettings = Depends(get_app_settings),
) -> OffsetPaginationRequest:
    return OffsetPaginationRequest(
        page=page or settings.default_page,
        per_page=limit if limit is not None else settings.default_limit,
    )


def get_sort_order(
    arrange: Optional[str] = Query(None, description="ASC or DESC"),
    settings: InventorySettings = Depends(get_app_settings),
) -> SortOrder:
    value = (arrange or settings.default_arrange).upper()
    return SortOrder.DESC if value == SortOrder.DESC.value else SortOrder.ASC


def serialize(item: Any) -> Any:
    """JSON form of a service result: entities render through ``to_dict``."""
    if isinstance(item, list):
        return [serialize(entry) for entry in item]
    if item is None or isinstance(item, (dict, str, int, float, bool)):
        return item
    return item.to_dict()


def page_response(page: OffsetPaginationResponse) -> dict:
    return page.to_dict(serialize)
