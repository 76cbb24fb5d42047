"""Listing filters shared by the proxy and indicator template catalogs.

Templates are filtered in memory after loading; the helpers only rely on
``status``, ``visibility`` and ``tags`` attributes.
"""

from typing import Iterable, List, Sequence, TypeVar

from ...pagination.entities import SortOrder
from ...policy.services.policy import VisibilityPolicy
from ..entities.enums import TemplateStatus, Visibility

T = TypeVar("T")


def visible_to_communities(templates: Iterable[T]) -> List[T]:
    return [
        template for template in templates
        if VisibilityPolicy.is_visible_to_communities(template.status, template.visibility)
    ]


def with_tag(templates: Iterable[T], tag: str) -> List[T]:
    return [template for template in templates if tag in template.tags]


def with_status(templates: Iterable[T], status: TemplateStatus, is_admin: bool = True) -> List[T]:
    """Templates in ``status``; non-admins never see drafts."""
    return [
        template for template in templates
        if template.status == status and (is_admin or template.visibility != Visibility.DRAFT)
    ]


def collect_tags(templates: Sequence[T], is_admin: bool, order: SortOrder = SortOrder.ASC) -> List[str]:
    """Distinct tags, sorted; non-admins only get tags of publicly readable templates."""
    tags = set()
    for template in templates:
        if is_admin or VisibilityPolicy.is_publicly_readable(template.status, template.visibility):
            tags.update(template.tags)
    return sorted(tags, reverse=SortOrder(order) == SortOrder.DESC)
