"""
OAuth gateway and access token lifecycle.

The OauthGateway owns the current access token of a client. Before every
request it makes sure the token is valid, exchanging a grant for a new one
when it is missing or expired.
"""

import time
from typing import Any, Dict, List, Optional

import httpx
import structlog

from snoots.exceptions import RedditAPIError

from .creds import CredsGateway
from .gateway import Gateway
from .types import (
    BearerAuth,
    ClientAuth,
    Credentials,
    Token,
    TokenAuth,
    TokenResponse,
)

OAUTH_ENDPOINT = "https://oauth.reddit.com"
ACCESS_TOKEN_PATH = "api/v1/access_token"

Grant = Dict[str, str]


class OauthGateway(Gateway):
    """
    Gateway authenticating with an OAuth bearer token.

    Grant selection, in priority order:
    1. The refresh token returned by a previous exchange
    2. The ClientAuth given at construction (refresh token or password grant)
    3. Application-only client credentials, except for sessions created from
       an authorization code, which raise once they cannot be renewed

    Concurrent requests that all see an expired token each trigger their own
    refresh; the last exchange to complete wins.

    Example:
        >>> creds = Credentials(client_id="id", client_secret="secret")
        >>> gateway = OauthGateway(UsernameAuth(username="u", password="p"), creds, "ua")
        >>> about = await gateway.get("api/v1/me")
    """

    def __init__(
        self,
        auth: Optional[ClientAuth],
        creds: Credentials,
        user_agent: str,
        http_client: Optional[httpx.AsyncClient] = None,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        super().__init__(
            OAUTH_ENDPOINT, user_agent, http_client=http_client, logger=logger
        )
        self.initial_auth = auth
        self.creds = creds
        self.token: Optional[Token] = None
        # Set for sessions created from an authorization code.
        self.user_session = False
        self._creds_gateway = CredsGateway(
            creds, user_agent, http_client=self._http, logger=logger
        )

    @classmethod
    async def from_auth_code(
        cls,
        code: str,
        redirect_uri: str,
        creds: Credentials,
        user_agent: str,
        **kwargs: Any,
    ) -> "OauthGateway":
        """
        Create a gateway from an OAuth authorization code.

        Args:
            code: The code Reddit passed to the redirect URI
            redirect_uri: Must be identical to the URI used for authorization
            creds: The application credentials
            user_agent: The unique user agent of the application

        Returns:
            A gateway holding the exchanged token
        """
        gateway = cls(None, creds, user_agent, **kwargs)
        gateway.user_session = True
        await gateway.update_token_from_grant(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
            }
        )
        # Later refreshes stay on behalf of the user who authorized the app.
        refresh_token = gateway.get_refresh_token()
        if refresh_token is not None:
            gateway.initial_auth = TokenAuth(refresh_token=refresh_token)
        return gateway

    def get_refresh_token(self) -> Optional[str]:
        """Get the refresh token of the current session, if any."""
        return self.token.refresh if self.token else None

    def get_scopes(self) -> Optional[List[str]]:
        """Get the scopes authorized for the current session, if known."""
        return self.token.scopes if self.token else None

    async def auth(self) -> BearerAuth:
        await self.ensure_token_valid()
        if self.token is None:
            raise RuntimeError("No access token after a successful refresh")
        return BearerAuth(bearer=self.token.access)

    def map_path(self, path: str) -> str:
        return path

    async def ensure_token_valid(self) -> None:
        """Refresh the access token if it is missing or expired."""
        if self.token is None or self.token.is_expired(time.time()):
            await self.update_access_token()

    def select_grant(self) -> Grant:
        """
        Pick the grant to exchange for a new access token.

        Raises:
            RedditAPIError: If a session created from a temporary
                authorization code expired; it never falls back on
                application-only credentials
        """
        if self.token is not None and self.token.refresh is not None:
            return {"grant_type": "refresh_token", "refresh_token": self.token.refresh}

        auth = self.initial_auth
        if isinstance(auth, TokenAuth):
            return {"grant_type": "refresh_token", "refresh_token": auth.refresh_token}
        if auth is not None:
            return {
                "grant_type": "password",
                "username": auth.username,
                "password": auth.password,
            }

        if self.user_session:
            self.logger.error("user_session_expired")
            raise RedditAPIError(
                "Authorization expired and cannot be renewed without a refresh "
                "token; authorize the app again"
            )

        return {"grant_type": "client_credentials"}

    async def update_access_token(self) -> None:
        await self.update_token_from_grant(self.select_grant())

    async def update_token_from_grant(self, grant: Grant) -> None:
        """
        Exchange a grant for a new access token and store it.

        The new token replaces the old one wholesale. Reddit does not always
        reissue a refresh token; when it does not, the next refresh falls back
        on the initial ClientAuth.

        Errors from the exchange propagate unchanged and leave the stored
        token untouched, so the next request runs the same refresh again.
        """
        self.logger.info("access_token_refreshing", grant_type=grant["grant_type"])

        raw = await self._creds_gateway.post(ACCESS_TOKEN_PATH, grant)
        response = TokenResponse.model_validate(raw)

        self.token = Token(
            access=response.access_token,
            expiration=time.time() + response.expires_in,
            refresh=response.refresh_token,
            scopes=response.scope.split() if response.scope else None,
        )

        self.logger.info(
            "access_token_refreshed",
            grant_type=grant["grant_type"],
            expires_in=response.expires_in,
            has_refresh_token=self.token.refresh is not None,
        )
