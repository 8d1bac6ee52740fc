"""Supabase Auth token verification."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from supabase import Client

_logger = logging.getLogger(__name__)


class AuthGateway(Protocol):
    """Interface for resolving an access token to a user id."""

    def get_user_id(self, token: str) -> UUID | None:
        """Return the user id for a valid token, otherwise None."""


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Verify access tokens against Supabase Auth."""

    client: Client

    def get_user_id(self, token: str) -> UUID | None:
        """Look up the user that owns the token."""
        try:
            response = self.client.auth.get_user(token)
        except Exception:
            _logger.exception("Supabase token verification failed")
            return None
        user = getattr(response, "user", None)
        if user is None:
            return None
        return UUID(str(user.id))
