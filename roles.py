"""Role taxonomy and the user record the dashboard shell reads from client storage."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class Role(str, Enum):
    ADMIN = "admin"
    KAM = "kam"
    PL = "pl"
    DEVELOPER = "developer"
    CUSTOMER = "customer"


# Names used by the external auth service and older clients
ROLE_ALIASES = {
    "siteflow_admin": Role.ADMIN,
    "siteflow_kam": Role.KAM,
    "siteflow_pl": Role.PL,
    "projectLeader": Role.PL,
    "siteflow_dev_frontend": Role.DEVELOPER,
    "siteflow_dev_backend": Role.DEVELOPER,
    "siteflow_dev_fullstack": Role.DEVELOPER,
}

ROLE_DISPLAY_NAMES = {
    Role.ADMIN: "Admin",
    Role.KAM: "Key Account Manager",
    Role.PL: "Projektledare",
    Role.DEVELOPER: "Utvecklare",
    Role.CUSTOMER: "Kund",
}

STAFF_ROLES = frozenset({Role.ADMIN, Role.KAM, Role.PL, Role.DEVELOPER})


def normalize_role(value: Any) -> Role:
    """Map a stored role value onto the closed role set.

    Anything unrecognised becomes CUSTOMER, the least privileged role.
    """
    if isinstance(value, Role):
        return value
    if not isinstance(value, str):
        return Role.CUSTOMER
    if value in ROLE_ALIASES:
        return ROLE_ALIASES[value]
    try:
        return Role(value)
    except ValueError:
        return Role.CUSTOMER


def is_admin(role: Role) -> bool:
    return role == Role.ADMIN


def is_kam(role: Role) -> bool:
    return role == Role.KAM


def is_project_leader(role: Role) -> bool:
    return role == Role.PL


def is_developer(role: Role) -> bool:
    return role == Role.DEVELOPER


def is_siteflow_staff(role: Role) -> bool:
    return role in STAFF_ROLES


def can_log_time(role: Role) -> bool:
    return is_siteflow_staff(role)


def can_manage_companies(role: Role) -> bool:
    return is_admin(role)


def can_view_all_customers(role: Role) -> bool:
    return is_admin(role) or is_kam(role)


def role_display_name(role: Role) -> str:
    return ROLE_DISPLAY_NAMES[normalize_role(role)]


def overview_dashboard_for(role: Role) -> str:
    """Which overview dashboard the shell shows on the landing page."""
    if is_admin(role):
        return "admin"
    if is_kam(role):
        return "kam"
    if is_project_leader(role):
        return "project_leader"
    if is_developer(role):
        return "developer"
    return "customer"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: Role = Role.CUSTOMER
    avatar: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        """Build a user from the JSON record the login flow stores in the browser."""
        name = data.get("name")
        if not name:
            parts = [data.get("firstName") or "", data.get("lastName") or ""]
            name = " ".join(p for p in parts if p).strip()
        return cls(
            id=str(data.get("id") or ""),
            name=str(name or ""),
            email=str(data.get("email") or ""),
            role=normalize_role(data.get("role")),
            avatar=data.get("avatar") or None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "avatar": self.avatar,
        }
