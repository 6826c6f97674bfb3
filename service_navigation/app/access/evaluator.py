"""
Access evaluation for navigation items and sections.
"""

from typing import Callable, Iterable, List, Optional, Union

from shared.logging import get_logger
from shared.rules import PermissionLookup, all_granted, any_granted, is_member
from .models import NavigationItem, NavigationSection, Role, User

DEFAULT_BYPASS_ROLES = frozenset({Role.SUPER_ADMIN, Role.ADMIN})
DEFAULT_LANDING_ROUTE = "/dashboard"


class AccessEvaluator:
    """Decides which navigation items a user may see.

    Rules are checked in order and the first that applies decides:

    1. bypass roles see everything;
    2. the landing route is open to any authenticated user;
    3. a single required permission is looked up;
    4. a permission set is combined with OR (``requires_any``) or AND;
    5. an item declaring no permission is allowed.

    ``has_permission`` is called as-is; anything it raises reaches the
    caller, which decides whether an error means deny.
    """

    def __init__(
        self,
        has_permission: PermissionLookup,
        bypass_roles: Iterable[Union[Role, str]] = DEFAULT_BYPASS_ROLES,
        landing_route: str = DEFAULT_LANDING_ROUTE,
    ):
        self.has_permission = has_permission
        self.bypass_roles = frozenset(Role(r) for r in bypass_roles)
        self.landing_route = landing_route
        self.logger = get_logger("navigation.evaluator")

    def is_bypass(self, user: User) -> bool:
        """Whether permission checks are skipped for ``user``."""
        if user is None:
            raise ValueError("user is required")
        return is_member(user.role, self.bypass_roles)

    def can_access(self, user: User, item: NavigationItem) -> bool:
        """Check whether ``user`` may see ``item``."""
        if self.is_bypass(user):
            return True

        if item.href == self.landing_route:
            return True

        if item.required_permission is not None:
            return self.has_permission(item.required_permission.value)

        if item.required_permissions:
            keys = [p.value for p in item.required_permissions]
            if item.requires_any:
                return any_granted(keys, self.has_permission)
            return all_granted(keys, self.has_permission)

        # Ungated legacy item
        return True

    def filter_section(self, user: User, section: NavigationSection) -> Optional[NavigationSection]:
        """Return ``section`` with only accessible items, or None if none are."""
        accessible = tuple(item for item in section.items if self.can_access(user, item))

        if not accessible:
            self.logger.debug("Section hidden", section=section.title, user_id=user.id)
            return None

        return section.model_copy(update={"items": accessible})

    def filter_navigation(self, user: User, sections: Iterable[NavigationSection]) -> List[NavigationSection]:
        """Filter every section, dropping the empty ones."""
        filtered = []
        for section in sections:
            visible = self.filter_section(user, section)
            if visible is not None:
                filtered.append(visible)
        return filtered

    def is_route_active(self, href: str, current_path: str) -> bool:
        """Whether ``current_path`` lies within ``href``.

        The landing route only matches itself, otherwise every page would
        count as being inside it.
        """
        if href == self.landing_route:
            return current_path == self.landing_route
        return current_path.startswith(href)

    def route_matcher(self, current_path: str) -> Callable[[NavigationItem], bool]:
        """Predicate over items for use with section auto-expansion."""
        return lambda item: self.is_route_active(item.href, current_path)

    def can_enter_route(self, user: User, required_role: Optional[Union[Role, str]] = None) -> bool:
        """Role guard for whole routes, independent of item permissions."""
        if required_role is None or self.is_bypass(user):
            return True
        return user.role == Role(required_role)
