"""
Navigation service — sidebar entries and dashboard panels for a session.

Both are static tables filtered through the resolved Visibility: a
sidebar entry needs its section, a dashboard option needs its action.
Invoice sub-menus come from the configured invoice companies.
"""

from dataclasses import dataclass, field
from typing import Optional

from officedesk.config import settings
from officedesk.rbac import ActionId, NavSection, Visibility


@dataclass(frozen=True)
class NavEntry:
    section: NavSection
    label: str
    href: str
    icon: str = ""
    children: tuple["NavEntry", ...] = ()

    def to_dict(self) -> dict:
        data = {
            "section": self.section.value,
            "label": self.label,
            "href": self.href,
            "icon": self.icon,
        }
        if self.children:
            data["children"] = [c.to_dict() for c in self.children]
        return data


@dataclass(frozen=True)
class PanelOption:
    title: str
    route: str
    action: Optional[ActionId] = None
    icon: str = ""


@dataclass(frozen=True)
class DashboardPanel:
    section: NavSection
    title: str
    options: tuple[PanelOption, ...] = field(default_factory=tuple)


def _invoice_children() -> tuple[NavEntry, ...]:
    return tuple(
        NavEntry(NavSection.INVOICE, cfg["label"], f"/invoice/{slug}")
        for slug, cfg in settings.invoice_companies.items()
    )


def sidebar_entries() -> list[NavEntry]:
    return [
        NavEntry(NavSection.DASHBOARD, "Dashboard", "/", "building"),
        NavEntry(
            NavSection.INVOICE, "Invoice", "/invoice", "file-invoice", _invoice_children()
        ),
        NavEntry(NavSection.PAYSLIP, "Payslip", "/payslip", "file-text"),
        NavEntry(NavSection.EMPLOYEE, "Employees", "/employee", "users"),
        NavEntry(NavSection.KPI, "KPI", "/kpi", "target"),
        NavEntry(NavSection.USERACCESS, "User Access", "/useraccess", "shield"),
        NavEntry(NavSection.SETTINGS, "Settings", "/settings", "settings"),
    ]


def dashboard_panels() -> list[DashboardPanel]:
    invoice_options = tuple(
        PanelOption(cfg["label"], f"/invoice/{slug}", ActionId.INVOICE_VIEW, "🧾")
        for slug, cfg in settings.invoice_companies.items()
    )
    return [
        DashboardPanel(NavSection.INVOICE, "Invoice", invoice_options),
        DashboardPanel(
            NavSection.PAYSLIP,
            "Payslip",
            (PanelOption("Generate", "/payslip/enoylity/generate", ActionId.PAYSLIP_GENERATE, "📄"),),
        ),
        DashboardPanel(
            NavSection.EMPLOYEE,
            "Employees",
            (
                PanelOption("Add", "/employee/add", ActionId.EMPLOYEE_ADD, "➕"),
                PanelOption("View", "/employee", ActionId.EMPLOYEE_VIEW, "👥"),
            ),
        ),
        DashboardPanel(
            NavSection.KPI,
            "KPI",
            (
                PanelOption("Add", "/kpi/addupdate", ActionId.KPI_ADD, "➕"),
                PanelOption("View", "/kpi", ActionId.KPI_VIEW, "📈"),
            ),
        ),
        DashboardPanel(
            NavSection.USERACCESS,
            "User Access",
            (
                PanelOption("New", "/useraccess/manage", ActionId.USERACCESS_ADD, "🛡️"),
                PanelOption("View", "/useraccess", ActionId.USERACCESS_VIEW, "👥"),
            ),
        ),
        DashboardPanel(
            NavSection.SETTINGS,
            "Settings",
            (PanelOption("Invoice", "/settings/invoice", ActionId.SETTINGS_MANAGE, "⚙️"),),
        ),
    ]


def build_sidebar(visibility: Visibility) -> list[dict]:
    return [e.to_dict() for e in sidebar_entries() if e.section in visibility.sections]


def build_dashboard(visibility: Visibility) -> list[dict]:
    """Panels for visible sections, each keeping only options the session may use."""
    panels = []
    for panel in dashboard_panels():
        if panel.section not in visibility.sections:
            continue
        options = [
            {"title": o.title, "route": o.route, "icon": o.icon}
            for o in panel.options
            if o.action is None or o.action in visibility.actions
        ]
        if options:
            panels.append(
                {"section": panel.section.value, "title": panel.title, "options": options}
            )
    return panels
