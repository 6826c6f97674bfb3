"""
Navigation service for the Clinic Access Layer.
"""

import time
from typing import List, Optional

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.logging import set_user_context

from .access.collapse import SectionCollapseState
from .access.evaluator import AccessEvaluator
from .access.models import (
    User, NavigationSection, MemberContext,
    AccessCheckRequest, AccessCheckResponse, SectionView, NavigationResponse
)
from .access.permissions import ClinicMembership
from .catalog import DEFAULT_NAVIGATION


class NavigationService(BaseService):
    """Navigation service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None,
                 sections: Optional[List[NavigationSection]] = None):
        super().__init__("navigation", 8021, config)
        self.sections = list(sections if sections is not None else DEFAULT_NAVIGATION)
        self._setup_navigation_routes()

    def _evaluator_for(self, request: MemberContext):
        """Build the user and an evaluator bound to their clinic permissions."""
        user = User(id=request.user.id, role=request.user.role)
        membership = ClinicMembership.from_keys(user, request.clinic_role, request.permissions)
        set_user_context(user_id=user.id)
        evaluator = AccessEvaluator(
            membership.has_permission,
            bypass_roles=self.config.bypass_roles,
            landing_route=self.config.landing_route
        )
        return user, evaluator

    def _setup_navigation_routes(self):
        """Set up navigation-specific routes."""

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "navigation",
                "message": "Clinic Access Layer - Navigation Service",
                "version": "1.0.0",
                "sections": len(self.sections)
            }

        @self.app.post("/navigation", response_model=NavigationResponse)
        async def build_navigation(request: MemberContext):
            """Return the sections visible to the caller."""
            start_time = time.time()
            user, evaluator = self._evaluator_for(request)
            collapse = SectionCollapseState(evaluator, request.preferences)

            views = []
            for section in self.sections:
                if request.current_path:
                    collapse.auto_expand_if_active(
                        user, section, evaluator.route_matcher(request.current_path)
                    )
                visible = evaluator.filter_section(user, section)
                if visible is None:
                    continue
                views.append(SectionView(
                    title=visible.title,
                    collapsible=visible.collapsible,
                    collapsed=collapse.is_collapsed(visible),
                    items=list(visible.items)
                ))

            self.metrics.observe_histogram(
                "navigation_build_duration_seconds", time.time() - start_time
            )
            self.metrics.record_business_event("navigation_built")
            self.logger.info(
                "Navigation built",
                role=user.role.value,
                visible_sections=len(views),
                total_sections=len(self.sections)
            )

            return NavigationResponse(
                sections=views,
                preferences=collapse.preferences,
                bypass=evaluator.is_bypass(user)
            )

        @self.app.post("/navigation/check", response_model=AccessCheckResponse)
        async def check_item(request: AccessCheckRequest):
            """Check a single navigation item for the caller."""
            user, evaluator = self._evaluator_for(request)
            allowed = evaluator.can_access(user, request.item)

            self.metrics.increment_counter(
                "access_decisions_total", decision="allow" if allowed else "deny"
            )
            self.logger.debug(
                "Access decision",
                href=request.item.href,
                role=user.role.value,
                allowed=allowed
            )

            return AccessCheckResponse(allowed=allowed, bypass=evaluator.is_bypass(user))


def create_app():
    """Create navigation service application."""
    service = NavigationService()
    return service.app


if __name__ == "__main__":
    service = NavigationService()
    service.run()
