"""Resolution of request credentials to collection owners."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

_logger = logging.getLogger(__name__)


class AuthClient(Protocol):
    """Interface for validating access tokens issued by the auth provider."""

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid token, None otherwise."""


@dataclass
class UserService:
    """Application service mapping bearer tokens to user ids."""

    auth_client: AuthClient

    def resolve_user(self, authorization: str | None) -> UUID | None:
        """Return the user id behind an `Authorization: Bearer` header value."""
        if not authorization:
            return None
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        user_id = self.auth_client.get_user_id(token.strip())
        if user_id is None:
            _logger.info("Rejected request with an invalid access token")
        return user_id
