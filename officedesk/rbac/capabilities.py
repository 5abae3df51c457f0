"""
Capability names, navigation sections, actions, and the guard table.

Capability format: the free-text names the office API stores in a
subadmin's permission map, e.g. {"View Invoice details": 1}.
Action format:     "{section}.{verb}"

The admin role bypasses this table entirely (see resolver).
"""

from enum import Enum

from officedesk.session import Role
from .guards import Always, AllOf, Cap, HasRole, Never, any_cap


# ── Capabilities ─────────────────────────────────────────────────
VIEW_INVOICE = "View Invoice details"
GENERATE_INVOICE = "Generate invoice details"
VIEW_PAYSLIP = "View payslip details"
GENERATE_PAYSLIP = "Generate payslip"
VIEW_EMPLOYEE = "View Employee Details"
ADD_EMPLOYEE = "Add Employee Details"
USER_ACCESS = "User Access"
MANAGE_SETTINGS = "Manage Settings"
MANAGE_KPI = "Manage KPI"
ADD_KPI = "Add KPI details"
DELETE_KPI = "Delete KPI"
VIEW_KPI = "View KPI details"

ALL_CAPABILITIES: tuple[str, ...] = (
    VIEW_INVOICE,
    GENERATE_INVOICE,
    VIEW_PAYSLIP,
    GENERATE_PAYSLIP,
    VIEW_EMPLOYEE,
    ADD_EMPLOYEE,
    USER_ACCESS,
    MANAGE_SETTINGS,
    MANAGE_KPI,
    ADD_KPI,
    DELETE_KPI,
    VIEW_KPI,
)


class NavSection(str, Enum):
    DASHBOARD = "dashboard"
    INVOICE = "invoice"
    PAYSLIP = "payslip"
    EMPLOYEE = "employee"
    USERACCESS = "useraccess"
    SETTINGS = "settings"
    KPI = "kpi"


class ActionId(str, Enum):
    INVOICE_VIEW = "invoice.view"
    INVOICE_GENERATE = "invoice.generate"
    PAYSLIP_VIEW = "payslip.view"
    PAYSLIP_GENERATE = "payslip.generate"
    EMPLOYEE_VIEW = "employee.view"
    EMPLOYEE_ADD = "employee.add"
    EMPLOYEE_EDIT = "employee.edit"
    EMPLOYEE_DELETE = "employee.delete"
    USERACCESS_VIEW = "useraccess.view"
    USERACCESS_ADD = "useraccess.add"
    USERACCESS_DELETE = "useraccess.delete"
    SETTINGS_MANAGE = "settings.manage"
    KPI_VIEW = "kpi.view"
    KPI_ADD = "kpi.add"
    KPI_EDIT = "kpi.edit"
    KPI_DELETE = "kpi.delete"
    KPI_PUNCH = "kpi.punch"
    KPI_MANAGE = "kpi.manage"
    KPI_EXPORT = "kpi.export"


# ── Section guards ───────────────────────────────────────────────
SECTION_GUARDS = {
    NavSection.DASHBOARD: Always(),
    NavSection.INVOICE: any_cap(VIEW_INVOICE, GENERATE_INVOICE),
    NavSection.PAYSLIP: any_cap(VIEW_PAYSLIP, GENERATE_PAYSLIP),
    NavSection.EMPLOYEE: any_cap(VIEW_EMPLOYEE, ADD_EMPLOYEE),
    NavSection.USERACCESS: Cap(USER_ACCESS),
    NavSection.SETTINGS: Cap(MANAGE_SETTINGS),
    NavSection.KPI: any_cap(VIEW_KPI, ADD_KPI, DELETE_KPI, MANAGE_KPI),
}

# KPI managers are subadmins holding "Manage KPI"; a plain user with the
# flag set does not qualify.
_KPI_MANAGER = AllOf(HasRole(Role.SUBADMIN), Cap(MANAGE_KPI))

# ── Action guards ────────────────────────────────────────────────
ACTION_GUARDS = {
    ActionId.INVOICE_VIEW: Cap(VIEW_INVOICE),
    ActionId.INVOICE_GENERATE: Cap(GENERATE_INVOICE),
    ActionId.PAYSLIP_VIEW: Cap(VIEW_PAYSLIP),
    ActionId.PAYSLIP_GENERATE: Cap(GENERATE_PAYSLIP),
    ActionId.EMPLOYEE_VIEW: Cap(VIEW_EMPLOYEE),
    ActionId.EMPLOYEE_ADD: Cap(ADD_EMPLOYEE),
    ActionId.EMPLOYEE_EDIT: Cap(ADD_EMPLOYEE),
    # no capability unlocks employee deletion; admin only
    ActionId.EMPLOYEE_DELETE: Never(),
    ActionId.USERACCESS_VIEW: Cap(USER_ACCESS),
    ActionId.USERACCESS_ADD: Cap(USER_ACCESS),
    ActionId.USERACCESS_DELETE: Cap(USER_ACCESS),
    ActionId.SETTINGS_MANAGE: Cap(MANAGE_SETTINGS),
    ActionId.KPI_VIEW: any_cap(VIEW_KPI, MANAGE_KPI),
    ActionId.KPI_ADD: any_cap(ADD_KPI, MANAGE_KPI),
    ActionId.KPI_EDIT: any_cap(ADD_KPI, MANAGE_KPI),
    ActionId.KPI_DELETE: Cap(DELETE_KPI),
    ActionId.KPI_PUNCH: any_cap(VIEW_KPI, MANAGE_KPI),
    ActionId.KPI_MANAGE: _KPI_MANAGER,
    ActionId.KPI_EXPORT: _KPI_MANAGER,
}

# Every section / action must have a guard
assert set(SECTION_GUARDS) == set(NavSection)
assert set(ACTION_GUARDS) == set(ActionId)
