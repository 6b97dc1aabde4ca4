"""Service-account access tokens for Google reporting APIs."""

import asyncio
import logging

from google.auth.transport.requests import Request
from google.oauth2 import service_account

from adapters.base import AdapterConfigError

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"

ANALYTICS_SCOPE = "https://www.googleapis.com/auth/analytics.readonly"
SEARCH_CONSOLE_SCOPE = "https://www.googleapis.com/auth/webmasters.readonly"


def normalize_private_key(raw: str) -> str:
    """Env files usually carry the PEM key with literal backslash-n sequences."""
    return raw.replace("\\n", "\n") if raw else raw


class ServiceAccountTokenSource:
    """Hands out bearer tokens for a service account and a single scope.

    Credentials are built on first use so missing configuration surfaces as a
    failed call, not a failed startup.
    """

    def __init__(self, client_email: str, private_key: str, scope: str):
        self.client_email = client_email
        self.private_key = normalize_private_key(private_key)
        self.scope = scope
        self._credentials = None

    @property
    def configured(self) -> bool:
        return bool(self.client_email and self.private_key)

    def _build_credentials(self):
        if not self.configured:
            raise AdapterConfigError("Google credentials not configured")
        return service_account.Credentials.from_service_account_info(
            {
                "client_email": self.client_email,
                "private_key": self.private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=[self.scope],
        )

    async def token(self) -> str:
        if self._credentials is None:
            self._credentials = self._build_credentials()
        if not self._credentials.valid:
            # google-auth refreshes with a blocking requests session
            await asyncio.to_thread(self._credentials.refresh, Request())
            logger.debug("Refreshed Google token for scope %s", self.scope)
        return self._credentials.token
