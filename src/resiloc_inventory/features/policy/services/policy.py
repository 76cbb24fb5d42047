"""Visibility and status policy for catalog records.

Every check is a pure function of the record's ``(status, visibility)`` and
facts about the caller that the identity service has already resolved. The
functions either return a boolean or raise the matching domain error.
"""

from typing import Iterable, Optional, Set, Tuple

from ....core.exceptions import BadRequestError, ForbiddenError
from ...catalog.entities.enums import TemplateStatus, Visibility
from ...users.entities.user import UserRole


PENDING_STATUSES = frozenset({TemplateStatus.REQUESTED, TemplateStatus.REJECTED})
APPROVED_STATUSES = frozenset({TemplateStatus.VERIFIED, TemplateStatus.ACCEPTED})
COMMUNITY_LEVEL_VISIBILITIES = frozenset({Visibility.PUBLIC, Visibility.COMMUNITY})
PRIVILEGED_COMMUNITY_ROLES = frozenset({UserRole.LOCAL_MANAGER, UserRole.RESILIENCE_EXPERT})


class VisibilityPolicy:
    """Read, write, transition and assignment gates for catalog templates."""

    @staticmethod
    def is_publicly_readable(status: Optional[TemplateStatus], visibility: Visibility) -> bool:
        """Non-owners may read records that are neither draft nor pending."""
        if Visibility(visibility) == Visibility.DRAFT:
            return False
        return status is None or TemplateStatus(status) not in PENDING_STATUSES

    @staticmethod
    def ensure_template_readable(
        label: str,
        status: Optional[TemplateStatus],
        visibility: Visibility,
        is_admin: bool,
        is_owner: bool,
    ) -> None:
        if is_admin or is_owner:
            return
        if status is not None and TemplateStatus(status) in PENDING_STATUSES:
            raise ForbiddenError(f"Only admin can see a {TemplateStatus(status).value} {label}")
        if Visibility(visibility) == Visibility.DRAFT:
            raise ForbiddenError(f"Only admin can see a {Visibility(visibility).value} {label}")

    @staticmethod
    def is_visible_to_communities(status: TemplateStatus, visibility: Visibility) -> bool:
        """Listing filter for catalog views shared by every community."""
        return (
            TemplateStatus(status) in APPROVED_STATUSES
            and Visibility(visibility) != Visibility.DRAFT
        )

    @staticmethod
    def creation_status(is_admin: bool) -> Tuple[TemplateStatus, Optional[Visibility]]:
        """Status and forced visibility of a newly created template.

        Admin-created templates are verified and keep the supplied
        visibility; requested ones start as drafts.
        """
        if is_admin:
            return TemplateStatus.VERIFIED, None
        return TemplateStatus.REQUESTED, Visibility.DRAFT

    @staticmethod
    def ensure_template_mutable(
        status: TemplateStatus,
        visibility: Visibility,
        is_admin: bool,
        is_owner: bool,
        allowed_statuses: Iterable[TemplateStatus] = PENDING_STATUSES,
    ) -> None:
        """Non-admins may only touch their own pending drafts."""
        if is_admin:
            return
        if (
            TemplateStatus(status) in frozenset(allowed_statuses)
            and Visibility(visibility) == Visibility.DRAFT
            and is_owner
        ):
            return
        raise ForbiddenError()

    @staticmethod
    def ensure_status_transition(
        label: str,
        current: TemplateStatus,
        target: TemplateStatus,
        in_use: bool,
    ) -> None:
        """An approved template in use cannot go back to pending."""
        current, target = TemplateStatus(current), TemplateStatus(target)
        if current in APPROVED_STATUSES and target in PENDING_STATUSES and in_use:
            raise BadRequestError(
                f"Cannot update this {current.value} {label} to {target.value} status "
                f"because it is being used by at least one community"
            )

    @staticmethod
    def ensure_assignable(
        label: str,
        record_id: str,
        status: Optional[TemplateStatus],
        visibility: Visibility,
    ) -> None:
        """Only approved, non-draft templates can be attached to communities."""
        if Visibility(visibility) == Visibility.DRAFT:
            raise BadRequestError(f"Unable to assign a draft {label}: {record_id}")
        if status is not None and TemplateStatus(status) in PENDING_STATUSES:
            raise BadRequestError(
                f"Unable to assign a {TemplateStatus(status).value} {label}: {record_id}"
            )

    @staticmethod
    def has_privileged_community_access(is_admin: bool, roles: Set[UserRole]) -> bool:
        return is_admin or bool(set(roles) & PRIVILEGED_COMMUNITY_ROLES)

    @staticmethod
    def filter_community_level(items, visibility_of, is_admin: bool, roles: Set[UserRole]):
        """Restrict a community's owned collection to what the caller may see."""
        if VisibilityPolicy.has_privileged_community_access(is_admin, roles):
            return list(items)
        return [
            item for item in items
            if Visibility(visibility_of(item)) in COMMUNITY_LEVEL_VISIBILITIES
        ]
