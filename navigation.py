"""Role-gated navigation for the dashboard shell.

Visibility is data-driven: every role owns a set of capabilities and every
navigation entry names the single capability it requires. Entries missing
from the visibility table are never shown.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from roles import Role, normalize_role

# ── Capabilities ─────────────────────────────────────────

EVERYONE = "everyone"
STAFF = "staff"
TIME_TRACKING = "time_tracking"
ACCOUNT_MANAGEMENT = "account_management"
COMPANY_MANAGEMENT = "company_management"

ROLE_CAPABILITIES: dict[Role, frozenset[str]] = {
    Role.ADMIN: frozenset({EVERYONE, STAFF, TIME_TRACKING, ACCOUNT_MANAGEMENT, COMPANY_MANAGEMENT}),
    Role.KAM: frozenset({EVERYONE, STAFF, TIME_TRACKING, ACCOUNT_MANAGEMENT}),
    Role.PL: frozenset({EVERYONE, STAFF, TIME_TRACKING}),
    Role.DEVELOPER: frozenset({EVERYONE, STAFF, TIME_TRACKING}),
    Role.CUSTOMER: frozenset({EVERYONE}),
}


@dataclass(frozen=True)
class NavItem:
    id: str
    label: str
    icon: str
    page: str

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "icon": self.icon, "page": self.page}


NAV_CATALOG: tuple[NavItem, ...] = (
    NavItem("dashboard", "Översikt", "layout-dashboard", "dashboard"),
    NavItem("projects", "Projekt", "folder-kanban", "dashboardProjects"),
    NavItem("tickets", "Ärenden", "ticket", "dashboardTickets"),
    NavItem("timeEntries", "Tidrapportering", "clock", "dashboardTimeEntries"),
    NavItem("documents", "Dokument", "file-text", "dashboardDocuments"),
    NavItem("team", "Team", "users", "dashboardTeam"),
    NavItem("companies", "Företag", "building", "dashboardCompanies"),
    NavItem("aiChat", "AI-chatt", "message-square", "dashboardAIChat"),
    NavItem("knowledge", "Kunskapsbas", "brain", "dashboardKnowledge"),
    NavItem("aiDocs", "AI-dokument", "sparkles", "dashboardAIDocs"),
    NavItem("productPlans", "Produktplaner", "file-check", "dashboardProductPlans"),
    NavItem("formResponses", "Formulärsvar", "clipboard-list", "dashboardFormResponses"),
    NavItem("fileBrowser", "Filer", "folder-open", "dashboardFileBrowser"),
    NavItem("analytics", "Analys", "bar-chart-3", "dashboardAnalytics"),
    NavItem("integrations", "Integrationer", "puzzle", "dashboardIntegrations"),
    NavItem("apiPortal", "API & Utvecklare", "key", "dashboardApiPortal"),
    NavItem("auditLog", "Granskningslogg", "history", "dashboardAuditLog"),
    NavItem("settings", "Inställningar", "settings", "dashboardSettings"),
)

NAV_VISIBILITY: dict[str, str] = {
    "dashboard": EVERYONE,
    "projects": EVERYONE,
    "tickets": EVERYONE,
    "documents": EVERYONE,
    "aiChat": EVERYONE,
    "productPlans": EVERYONE,
    "settings": EVERYONE,
    "timeEntries": TIME_TRACKING,
    "team": STAFF,
    "knowledge": STAFF,
    "aiDocs": STAFF,
    "analytics": STAFF,
    "integrations": ACCOUNT_MANAGEMENT,
    "apiPortal": ACCOUNT_MANAGEMENT,
    "companies": COMPANY_MANAGEMENT,
    "formResponses": COMPANY_MANAGEMENT,
    "fileBrowser": COMPANY_MANAGEMENT,
    "auditLog": COMPANY_MANAGEMENT,
}


def capabilities_for(role) -> frozenset[str]:
    return ROLE_CAPABILITIES.get(normalize_role(role), frozenset())


def is_visible(item_id: str, role) -> bool:
    required = NAV_VISIBILITY.get(item_id)
    if required is None:
        return False
    return required in capabilities_for(role)


def visible_nav_items(role, catalog: Sequence[NavItem] = NAV_CATALOG) -> list[NavItem]:
    """Return the catalog entries the role may see, in catalog order."""
    return [item for item in catalog if is_visible(item.id, role)]


# ── Command palette ──────────────────────────────────────

NAVIGATION_GROUP = "Navigation"
ACTIONS_GROUP = "Åtgärder"
DEFAULT_GROUP = "Övrigt"


@dataclass(frozen=True)
class CommandItem:
    id: str
    label: str
    icon: str
    group: str = DEFAULT_GROUP
    page: str | None = None
    action: str | None = None
    keywords: tuple[str, ...] = field(default_factory=tuple)

    def matches(self, query: str) -> bool:
        needle = query.strip().lower()
        if not needle:
            return True
        if needle in self.label.lower():
            return True
        return any(needle in kw.lower() for kw in self.keywords)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "icon": self.icon,
            "group": self.group,
            "page": self.page,
            "action": self.action,
            "keywords": list(self.keywords),
        }


FIXED_COMMANDS: tuple[CommandItem, ...] = (
    CommandItem(
        id="home",
        label="Gå till startsidan",
        icon="home",
        group=ACTIONS_GROUP,
        page="home",
        keywords=("hem", "start", "home"),
    ),
    CommandItem(
        id="logout",
        label="Logga ut",
        icon="log-out",
        group=ACTIONS_GROUP,
        action="logout",
        keywords=("logout", "logga ut", "avsluta"),
    ),
)


def command_items(role) -> list[CommandItem]:
    """Command palette entries: every visible page, then home and logout."""
    items = [
        CommandItem(
            id=nav.id,
            label=nav.label,
            icon=nav.icon,
            group=NAVIGATION_GROUP,
            page=nav.page,
            keywords=(nav.id, nav.label.lower()),
        )
        for nav in visible_nav_items(role)
    ]
    items.extend(FIXED_COMMANDS)
    return items


def search_commands(items: Iterable[CommandItem], query: str | None) -> list[CommandItem]:
    return [item for item in items if item.matches(query or "")]


def group_commands(items: Iterable[CommandItem]) -> dict[str, list[CommandItem]]:
    """Group palette entries, keeping first-seen group order."""
    grouped: dict[str, list[CommandItem]] = {}
    for item in items:
        grouped.setdefault(item.group or DEFAULT_GROUP, []).append(item)
    return grouped


# ── Breadcrumbs ──────────────────────────────────────────

def breadcrumbs(role, current_page: str) -> list[dict]:
    crumbs = [{"label": "Dashboard", "page": "dashboard"}]
    if current_page == "dashboard":
        return crumbs
    current = next((item for item in visible_nav_items(role) if item.page == current_page), None)
    if current:
        crumbs.append({"label": current.label, "page": None})
    return crumbs
