"""
Default navigation of the clinic dashboard.

Declared once at import; an unknown permission key here fails module
import through model validation.
"""

from typing import List, Optional

from .access.models import NavigationItem, NavigationSection, Permission

P = Permission


def _item(href: str, name: str, icon: str, permission: Optional[P] = None, any_of=()) -> NavigationItem:
    if any_of:
        return NavigationItem(href=href, name=name, icon=icon,
                              required_permissions=any_of, requires_any=True)
    return NavigationItem(href=href, name=name, icon=icon, required_permission=permission)


DEFAULT_NAVIGATION: List[NavigationSection] = [
    NavigationSection(
        title="Dashboard & AI",
        items=(
            _item("/dashboard", "Dashboard", "LayoutDashboard"),
            _item("/dashboard/xray-analysis", "X-Ray Analysis", "Scan", P.XRAY_ANALYSIS_VIEW),
            _item("/dashboard/ai-test-analysis", "AI Test Analysis", "Brain", P.TEST_REPORTS_VIEW),
            _item("/dashboard/ai-test-comparison", "AI Test Comparison", "GitCompare", P.TEST_REPORTS_VIEW),
        ),
    ),
    NavigationSection(
        title="CRM",
        items=(
            _item("/dashboard/leads", "Leads", "UserPlus",
                  any_of=(P.PATIENTS_CREATE, P.LEADS_VIEW)),
        ),
    ),
    NavigationSection(
        title="Clinical",
        items=(
            _item("/dashboard/appointments", "Appointments", "Calendar", P.APPOINTMENTS_VIEW),
            _item("/dashboard/patients", "Patients", "Users", P.PATIENTS_VIEW),
            _item("/dashboard/prescriptions", "Prescriptions", "Pill", P.PRESCRIPTIONS_VIEW),
            _item("/dashboard/odontograms", "Odontograms", "Smile", P.ODONTOGRAM_VIEW),
        ),
    ),
    NavigationSection(
        title="Laboratory",
        items=(
            _item("/dashboard/test-reports", "Test Reports", "FlaskConical", P.TEST_REPORTS_VIEW),
            _item("/dashboard/tests", "Tests", "TestTube", P.TESTS_VIEW),
        ),
    ),
    NavigationSection(
        title="Finance",
        items=(
            _item("/dashboard/billing", "Billing", "Receipt",
                  any_of=(P.INVOICES_VIEW, P.PAYMENTS_VIEW)),
            _item("/dashboard/invoices", "Invoices", "FileText", P.INVOICES_VIEW),
            _item("/dashboard/payments", "Payments", "CreditCard", P.PAYMENTS_VIEW),
            _item("/dashboard/expenses", "Expenses", "Wallet", P.EXPENSES_VIEW),
            _item("/dashboard/performance", "Performance", "TrendingUp", P.ANALYTICS_REPORTS),
        ),
    ),
    NavigationSection(
        title="Services",
        items=(
            _item("/dashboard/services", "Services", "Stethoscope", P.SERVICES_VIEW),
            _item("/dashboard/departments", "Departments", "Building", P.DEPARTMENTS_VIEW),
            _item("/dashboard/lab-vendors", "Lab Vendors", "Truck", P.LAB_VENDORS_VIEW),
        ),
    ),
    NavigationSection(
        title="Staff",
        items=(
            _item("/dashboard/staff", "Staff", "UserCog", P.USERS_VIEW),
            _item("/dashboard/payroll", "Payroll", "Banknote", P.PAYROLL_VIEW),
            _item("/dashboard/permissions", "Roles & Permissions", "Shield", P.PERMISSIONS_VIEW),
        ),
    ),
    NavigationSection(
        title="Reports",
        items=(
            _item("/dashboard/calendar", "Calendar", "CalendarDays", P.APPOINTMENTS_VIEW),
            _item("/dashboard/reports", "Reports", "BarChart",
                  any_of=(P.ANALYTICS_REPORTS, P.ANALYTICS_DASHBOARD)),
        ),
    ),
    NavigationSection(
        title="Administration",
        items=(
            _item("/dashboard/clinics", "Clinics", "Hospital", P.CLINICS_VIEW),
            _item("/dashboard/settings", "Settings", "Settings", P.SETTINGS_VIEW),
        ),
    ),
]
