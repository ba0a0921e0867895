"""Interface to the external authentication service.

Token issuance and user storage live outside this server. Routes only need to
resolve an optional bearer token into a user so their preferred languages can
narrow catalog queries.
"""

from typing import Optional, Protocol
from pydantic import BaseModel, Field


class User(BaseModel):
    """Authenticated user as reported by the auth service."""
    id: str
    username: Optional[str] = None
    preferred_languages: list[str] = Field(default_factory=list)


class TokenValidator(Protocol):
    """Resolve a bearer token to a user, or ``None`` when it is not valid."""

    async def validate_token(self, token: str) -> Optional[User]:
        ...
