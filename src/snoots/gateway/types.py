"""
Wire and state models shared by the gateways.

All of these are pydantic models so that token responses and credentials are
validated once, where they enter the client.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Values allowed in a query string.
QueryValue = Union[str, int, float, bool, None]
Query = Dict[str, QueryValue]
Data = Dict[str, Any]


class Credentials(BaseModel):
    """
    Reddit API application credentials.

    Both values are shown on https://www.reddit.com/prefs/apps/ once an app
    has been created. The ID sits below the app name, the secret next to
    "secret".
    """

    model_config = ConfigDict(frozen=True)

    client_id: str = Field(..., description="The ID of the Reddit application")
    client_secret: str = Field(
        ..., description="The secret of the Reddit application"
    )


class UsernameAuth(BaseModel):
    """Username and password based authentication."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str


class TokenAuth(BaseModel):
    """
    OAuth refresh token based authentication.

    snoots does not obtain refresh tokens by itself outside of the
    authorization code flow; bring one from a previous session.
    """

    model_config = ConfigDict(frozen=True)

    refresh_token: str


ClientAuth = Union[UsernameAuth, TokenAuth]


class BasicAuth(BaseModel):
    """HTTP basic credentials for a single request."""

    user: str
    password: str


class BearerAuth(BaseModel):
    """OAuth bearer credentials for a single request."""

    bearer: str


Auth = Union[BasicAuth, BearerAuth]


class Token(BaseModel):
    """An OAuth access token. Replaced on refresh, never mutated."""

    model_config = ConfigDict(frozen=True)

    access: str
    expiration: float = Field(..., description="Expiry as epoch seconds")
    refresh: Optional[str] = None
    scopes: Optional[List[str]] = None

    def is_expired(self, now: float) -> bool:
        return self.expiration <= now


class TokenResponse(BaseModel):
    """Body returned by ``api/v1/access_token``."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    token_type: str = "bearer"
    expires_in: float
    refresh_token: Optional[str] = None
    scope: str = ""


class RateLimit(BaseModel):
    """The last known rate limit state."""

    model_config = ConfigDict(frozen=True)

    remaining: int = Field(..., description="How many requests are remaining")
    reset: float = Field(..., description="When the window resets, epoch seconds")
