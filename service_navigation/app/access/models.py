"""
Access data models for the Navigation Service.
"""

from typing import Dict, Optional, List, Tuple
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Closed set of clinic roles."""
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    DOCTOR = "doctor"
    NURSE = "nurse"
    RECEPTIONIST = "receptionist"
    STAFF = "staff"
    ACCOUNTANT = "accountant"


class Permission(str, Enum):
    """Namespaced ``resource.action`` permission keys.

    Navigation items may only declare keys from this catalog, so a typo
    fails validation when the item is declared instead of silently
    denying at runtime.
    """
    ANALYTICS_DASHBOARD = "analytics.dashboard"
    ANALYTICS_REPORTS = "analytics.reports"
    APPOINTMENTS_VIEW = "appointments.view"
    CLINICS_VIEW = "clinics.view"
    DEPARTMENTS_VIEW = "departments.view"
    EXPENSES_VIEW = "expenses.view"
    INVOICES_VIEW = "invoices.view"
    LAB_VENDORS_VIEW = "lab_vendors.view"
    LEADS_VIEW = "leads.view"
    ODONTOGRAM_VIEW = "odontogram.view"
    PATIENTS_CREATE = "patients.create"
    PATIENTS_VIEW = "patients.view"
    PAYMENTS_VIEW = "payments.view"
    PAYROLL_VIEW = "payroll.view"
    PERMISSIONS_VIEW = "permissions.view"
    PRESCRIPTIONS_VIEW = "prescriptions.view"
    SERVICES_VIEW = "services.view"
    SETTINGS_VIEW = "settings.view"
    TEST_REPORTS_VIEW = "test_reports.view"
    TESTS_VIEW = "tests.view"
    USERS_VIEW = "users.view"
    XRAY_ANALYSIS_VIEW = "xray_analysis.view"


@dataclass(frozen=True)
class User:
    """Authenticated user; the role is fixed for the session."""
    id: str
    role: Role

    def __post_init__(self):
        object.__setattr__(self, "role", Role(self.role))


class NavigationItem(BaseModel):
    """A navigable route and the permissions gating it."""
    model_config = ConfigDict(frozen=True)

    href: str = Field(..., description="Route of the item")
    name: str = Field(..., description="Display key")
    icon: Optional[str] = Field(None, description="Icon name")
    required_permission: Optional[Permission] = Field(None, description="Single required permission")
    required_permissions: Tuple[Permission, ...] = Field(default=(), description="Permission set")
    requires_any: bool = Field(False, description="OR over required_permissions instead of AND")

    @property
    def is_ungated(self) -> bool:
        return self.required_permission is None and not self.required_permissions


class NavigationSection(BaseModel):
    """Ordered group of navigation items."""
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Display key, also the collapse preference key")
    items: Tuple[NavigationItem, ...] = Field(default=())
    collapsible: bool = True
    default_collapsed: bool = False


class UserPayload(BaseModel):
    """User as supplied by the session collaborator."""
    id: str
    role: Role


class MemberContext(BaseModel):
    """Request model describing the caller inside the selected clinic."""
    user: UserPayload
    clinic_role: Optional[Role] = Field(None, description="Role in the selected clinic")
    permissions: List[str] = Field(default_factory=list, description="Effective permission keys")
    current_path: Optional[str] = Field(None, description="Route currently displayed")
    preferences: Dict[str, bool] = Field(default_factory=dict, description="Collapse preferences by section title")


class AccessCheckRequest(MemberContext):
    """Request model for a single item check."""
    item: NavigationItem


class AccessCheckResponse(BaseModel):
    """Response model for a single item check."""
    allowed: bool
    bypass: bool = Field(False, description="Whether a bypass role decided the check")


class SectionView(BaseModel):
    """A filtered section with its collapse state resolved."""
    title: str
    collapsible: bool
    collapsed: bool
    items: List[NavigationItem]


class NavigationResponse(BaseModel):
    """Response model for the filtered navigation tree."""
    sections: List[SectionView]
    preferences: Dict[str, bool]
    bypass: bool = False
