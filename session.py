"""Decoding of the dashboard's browser local-storage snapshot.

The browser keeps three keys: the auth token issued by the external auth
service, the serialized user record and the sidebar-collapsed preference.
The shell page posts a snapshot of them; nothing here writes state back.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from roles import Role, User

logger = logging.getLogger(__name__)

AUTH_TOKEN_KEY = "auth_token"
USER_KEY = "user"
SIDEBAR_COLLAPSED_KEY = "sidebar_collapsed"

STORAGE_KEYS = (AUTH_TOKEN_KEY, USER_KEY, SIDEBAR_COLLAPSED_KEY)


@dataclass(frozen=True)
class ClientSession:
    token: Optional[str]
    user: Optional[User]
    sidebar_collapsed: bool = False

    @property
    def role(self) -> Role:
        return self.user.role if self.user else Role.CUSTOMER

    @property
    def authenticated(self) -> bool:
        return bool(self.token) and self.user is not None


def parse_user(raw: Optional[str]) -> Optional[User]:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed user record in client storage")
        return None
    if not isinstance(data, dict):
        return None
    return User.from_dict(data)


def parse_sidebar_collapsed(raw: Optional[str]) -> bool:
    if not raw:
        return False
    try:
        return json.loads(raw) is True
    except (TypeError, ValueError):
        return False


def read_client_session(storage: Mapping[str, Optional[str]] | None) -> ClientSession:
    """Build a ClientSession from a local-storage snapshot.

    Pure: the same snapshot always yields the same session.
    """
    storage = storage or {}
    return ClientSession(
        token=storage.get(AUTH_TOKEN_KEY) or None,
        user=parse_user(storage.get(USER_KEY)),
        sidebar_collapsed=parse_sidebar_collapsed(storage.get(SIDEBAR_COLLAPSED_KEY)),
    )
