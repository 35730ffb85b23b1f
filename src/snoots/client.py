"""
The snoots Client.

Every Client is independent: it owns one gateway, and with it one access
token and one rate limit state.

Example:
    >>> options = ClientOptions(
    ...     user_agent="linux:my-bot:v1.0 (by /u/me)",
    ...     creds=Credentials(client_id="...", client_secret="..."),
    ...     auth=UsernameAuth(username="...", password="..."),
    ... )
    >>> async with Client(options) as client:
    ...     comments = client.get_post_comments("abc123")
    ...     async for comment in comments:
    ...         print(comment.body)
"""

import re
from typing import Any, Callable, List, Optional, Sequence, Type, TypeVar
from urllib.parse import urlencode

import httpx
import structlog

from snoots.comment.listing import CommentListing
from snoots.config import ClientOptions
from snoots.exceptions import ConfigurationError, InvalidRedirectError
from snoots.gateway.anon import AnonGateway
from snoots.gateway.gateway import REDIRECT_KIND, Gateway
from snoots.gateway.oauth import OauthGateway
from snoots.gateway.types import Query, RateLimit
from snoots.listing.listing import Listing
from snoots.listing.types import (
    ListingContext,
    ListingRequest,
    RawObject,
    assert_kind,
    fake_listing_after,
)
from snoots.utils.logger import get_logger

AUTHORIZE_URL = "https://www.reddit.com/api/v1/authorize"

# Where /random redirects to; used to verify the redirect and extract the ID.
RANDOM_REDIRECT_PATTERN = re.compile(
    r"https://www\.reddit\.com/r/.+?/comments/(.+?)/.+?/"
)

T = TypeVar("T")
ClientT = TypeVar("ClientT", bound="Client")


class Client:
    """
    The main entry point of snoots.

    Which gateway is used depends on the options:
    - creds and auth: OAuth on behalf of a user
    - creds only: application-only OAuth
    - neither: anonymous, read-only requests

    Attributes:
        options: The options the client was created with
        gateway: The gateway requests are sent through
        logger: Logger bound to this client
    """

    def __init__(
        self,
        options: ClientOptions,
        gateway: Optional[Gateway] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        """
        Initialize a Client.

        Args:
            options: User agent, app credentials and user authorization
            gateway: Use this gateway instead of creating one
            http_client: Optional HTTP client for the created gateway
            logger: Optional logger to bind client context to
        """
        self.options = options
        self.logger = (logger or get_logger(__name__)).bind(
            user_agent=options.user_agent
        )

        if gateway is not None:
            self.gateway = gateway
        elif options.creds is not None:
            self.gateway = OauthGateway(
                options.auth,
                options.creds,
                options.user_agent,
                http_client=http_client,
                logger=self.logger,
            )
        else:
            self.gateway = AnonGateway(
                options.user_agent, http_client=http_client, logger=self.logger
            )

        self.logger.debug(
            "client_created",
            gateway=type(self.gateway).__name__,
            has_auth=options.auth is not None,
        )

    @property
    def rate_limit(self) -> Optional[RateLimit]:
        """
        The last known rate limit of this client.

        Only updated when this client makes a request; clients sharing one
        authorization do not see each other's requests.
        """
        return self.gateway.get_rate_limit()

    @staticmethod
    def make_auth_url(
        client_id: str,
        scopes: Sequence[str],
        redirect_uri: str,
        state: str = "snoots",
        temporary: bool = False,
    ) -> str:
        """
        Make an OAuth authorization URL.

        Args:
            client_id: The ID of the Reddit app
            scopes: The scopes to authorize
            redirect_uri: Where Reddit redirects to after authorization
            state: Arbitrary value passed back on redirect (CSRF token)
            temporary: Whether the authorization expires after an hour

        Returns:
            The URL to send the user to
        """
        query = urlencode(
            [
                ("client_id", client_id),
                ("response_type", "code"),
                ("state", state),
                ("redirect_uri", redirect_uri),
                ("duration", "temporary" if temporary else "permanent"),
                ("scope", " ".join(scopes)),
            ]
        )
        return f"{AUTHORIZE_URL}?{query}"

    @classmethod
    async def from_auth_code(
        cls: Type[ClientT],
        options: ClientOptions,
        code: str,
        redirect_uri: str,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> ClientT:
        """
        Create a client from an OAuth authorization code.

        Args:
            options: The client options; creds are required
            code: The code Reddit passed to the redirect URI
            redirect_uri: Must match the URI given to ``make_auth_url``

        Raises:
            ConfigurationError: If the options have no creds
        """
        if options.creds is None:
            raise ConfigurationError("App credentials are required for auth codes")

        logger = get_logger(__name__).bind(user_agent=options.user_agent)
        logger.info("client_from_auth_code")

        gateway = await OauthGateway.from_auth_code(
            code,
            redirect_uri,
            options.creds,
            options.user_agent,
            http_client=http_client,
            logger=logger,
        )
        return cls(options, gateway=gateway, logger=logger)

    def get_refresh_token(self) -> Optional[str]:
        """Get the refresh token of the current session, if there is one."""
        if isinstance(self.gateway, OauthGateway):
            return self.gateway.get_refresh_token()
        return None

    def get_authorized_scopes(self) -> Optional[List[str]]:
        """Get the authorized scopes, or None without an OAuth session."""
        if isinstance(self.gateway, OauthGateway):
            return self.gateway.get_scopes()
        return None

    def get_listing(
        self,
        url: str,
        from_raw: Callable[[RawObject], T],
        query: Optional[Query] = None,
    ) -> Listing[T]:
        """
        Get a Listing over an endpoint that pages with ``after``.

        Nothing is requested until the listing is iterated.

        Args:
            url: The API path, e.g. "r/python/new"
            from_raw: Converts one raw child into an item
            query: Query parameters repeated for every page
        """
        context = ListingContext(
            client=self, request=ListingRequest(url=url, query=query or {})
        )
        return Listing.from_page(fake_listing_after(""), context, from_raw)

    def get_post_comments(self, post_id: str) -> CommentListing:
        """Get the comments of a post, fetched lazily."""
        return CommentListing.for_post(post_id, self)

    async def get_random_post_id(self, subreddit: Optional[str] = None) -> str:
        """
        Get the ID of a random post.

        Args:
            subreddit: The subreddit to pick from; the front page without it

        Raises:
            InvalidKindError: If Reddit did not redirect
            InvalidRedirectError: If the redirect is not to a post
        """
        base = f"r/{subreddit}/" if subreddit else ""
        # Reddit implements /random by redirecting (302) to a random post.
        raw = await self.gateway.get(f"{base}random")
        redirect = assert_kind(REDIRECT_KIND, raw)

        location = redirect.data["location"]
        match = RANDOM_REDIRECT_PATTERN.match(location)
        if not match:
            raise InvalidRedirectError(location)
        return match.group(1)

    async def aclose(self) -> None:
        await self.gateway.aclose()

    async def __aenter__(self: ClientT) -> ClientT:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
