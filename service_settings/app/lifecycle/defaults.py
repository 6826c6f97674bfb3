"""
Built-in appointment statuses.
"""

from typing import FrozenSet, List

from .models import AppointmentStatus

STORAGE_KEY = "appointment_statuses"

# Scheduled, Confirmed, Completed, Cancelled
PROTECTED_STATUS_CODES: FrozenSet[str] = frozenset({"S001", "S002", "S004", "S005"})


def default_statuses() -> List[AppointmentStatus]:
    """Seed collection for a clinic with no stored statuses."""
    return [
        AppointmentStatus(code="S001", name_en="Scheduled", name_ar="مجدول",
                          color="#3b82f6", order=1, is_default=True),
        AppointmentStatus(code="S002", name_en="Confirmed", name_ar="مؤكد",
                          color="#10b981", order=2),
        AppointmentStatus(code="S003", name_en="In Progress", name_ar="قيد التنفيذ",
                          color="#f59e0b", order=3),
        AppointmentStatus(code="S004", name_en="Completed", name_ar="مكتمل",
                          color="#10b981", order=4),
        AppointmentStatus(code="S005", name_en="Cancelled", name_ar="ملغي",
                          color="#ef4444", order=5),
        AppointmentStatus(code="S006", name_en="No Show", name_ar="لم يحضر",
                          color="#f59e0b", order=6),
    ]


def fallback_statuses() -> List[AppointmentStatus]:
    """Display fallback used by lookups when a clinic has no active statuses."""
    return [
        AppointmentStatus(code="scheduled", name_en="Scheduled", name_ar="مجدول", color="#3b82f6",
                          order=1, show_in_calendar=True, is_default=True, icon="Clock"),
        AppointmentStatus(code="confirmed", name_en="Confirmed", name_ar="مؤكد", color="#10b981",
                          order=2, show_in_calendar=True, icon="CheckCircle"),
        AppointmentStatus(code="in-progress", name_en="In Progress", name_ar="قيد التنفيذ", color="#f59e0b",
                          order=3, show_in_calendar=True, icon="Loader2"),
        AppointmentStatus(code="completed", name_en="Completed", name_ar="مكتمل", color="#10b981",
                          order=4, show_in_calendar=True, icon="CheckCircle"),
        AppointmentStatus(code="cancelled", name_en="Cancelled", name_ar="ملغي", color="#ef4444",
                          order=5, icon="XCircle"),
        AppointmentStatus(code="no-show", name_en="No Show", name_ar="لم يحضر", color="#f59e0b",
                          order=6, icon="AlertCircle"),
    ]
