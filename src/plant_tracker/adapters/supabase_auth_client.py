"""Supabase Auth token validation."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from plant_tracker.services.users import AuthClient


@dataclass
class SupabaseAuthClient(AuthClient):
    """Validates access tokens against Supabase Auth."""

    client: Client

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the authenticated user's id, or None for a bad token."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError:
            return None
        if response is None or response.user is None:
            return None
        return UUID(str(response.user.id))
