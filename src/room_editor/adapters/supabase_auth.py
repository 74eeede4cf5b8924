"""Supabase Auth token verification."""

import logging
from dataclasses import dataclass
from typing import Protocol

from supabase import Client

_logger = logging.getLogger(__name__)


class AuthVerifier(Protocol):
    """Resolves a bearer token to a user id."""

    def get_user_id(self, token: str) -> str | None:
        """Return the user id for a valid token, otherwise None."""


@dataclass
class SupabaseAuthVerifier(AuthVerifier):
    """Verifies access tokens against Supabase Auth."""

    client: Client

    def get_user_id(self, token: str) -> str | None:
        """Look up the user owning a JWT."""
        try:
            response = self.client.auth.get_user(token)
        except Exception as exc:
            _logger.info("Rejected access token: %s", exc)
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        return str(user.id)
