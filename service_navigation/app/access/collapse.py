"""
Per-user collapse state of navigation sections.
"""

from typing import Callable, Dict, Optional

from shared.logging import get_logger
from .evaluator import AccessEvaluator
from .models import NavigationItem, NavigationSection, User


class SectionCollapseState:
    """Tracks which sections a user has collapsed.

    Preferences are keyed by section title and can be persisted by the
    caller through ``preferences``. Collapse state never feeds back into
    access decisions.
    """

    def __init__(self, evaluator: AccessEvaluator, preferences: Optional[Dict[str, bool]] = None):
        self.evaluator = evaluator
        self.preferences: Dict[str, bool] = dict(preferences or {})
        self.logger = get_logger("navigation.collapse")

    def is_collapsed(self, section: NavigationSection) -> bool:
        """Effective collapsed flag for ``section``."""
        if not section.collapsible:
            return False
        return self.preferences.get(section.title, section.default_collapsed)

    def toggle(self, section: NavigationSection) -> bool:
        """Flip the section and return the new collapsed flag."""
        collapsed = not self.is_collapsed(section)
        self.preferences[section.title] = collapsed
        return collapsed

    def auto_expand_if_active(
        self,
        user: User,
        section: NavigationSection,
        is_current_route_within_item: Callable[[NavigationItem], bool],
    ) -> bool:
        """Expand ``section`` when it holds the current route.

        Only ever expands. Returns True when the section was collapsed and
        has been opened.
        """
        if not self.is_collapsed(section):
            return False

        has_active_item = any(
            self.evaluator.can_access(user, item) and is_current_route_within_item(item)
            for item in section.items
        )
        if not has_active_item:
            return False

        self.preferences[section.title] = False
        self.logger.debug("Section auto-expanded", section=section.title)
        return True
