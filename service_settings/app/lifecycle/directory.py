"""
Read-side lookups over a clinic's appointment statuses.
"""

from typing import List, Optional

from .defaults import fallback_statuses
from .models import AppointmentStatus

UNKNOWN_STATUS_COLOR = "#6b7280"


class StatusDirectory:
    """Display lookups by status code.

    Only active statuses are visible. A clinic without any falls back to
    the built-in list so appointments still render with a name and color.
    """

    def __init__(self, collection: List[AppointmentStatus]):
        active = [s for s in collection if s.is_active and not s.is_deleted]
        self.statuses = active or fallback_statuses()

    def get(self, code: str) -> Optional[AppointmentStatus]:
        return next((s for s in self.statuses if s.code == code), None)

    def name(self, code: str, language: str = "en") -> str:
        status = self.get(code)
        if status is None:
            # "no-show" -> "No Show"
            return " ".join(word[:1].upper() + word[1:] for word in code.split("-"))
        return status.name_ar if language == "ar" else status.name_en

    def color(self, code: str) -> str:
        status = self.get(code)
        return status.color if status and status.color else UNKNOWN_STATUS_COLOR

    def calendar_statuses(self) -> List[AppointmentStatus]:
        return [s for s in self.statuses if s.show_in_calendar and s.is_active]
