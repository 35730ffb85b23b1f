"""
Unit tests for the snoots Client and its configuration.

Tests gateway selection, the authorization URL, random post lookups and
loading options from the environment.
"""

import os
from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from snoots import Client, ClientOptions, Credentials, TokenAuth, UsernameAuth
from snoots.comment import CommentListing
from snoots.exceptions import (
    ConfigurationError,
    InvalidKindError,
    InvalidRedirectError,
)
from snoots.gateway import AnonGateway, OauthGateway

USER_AGENT = "linux:snoots-tests:v1.0 (by /u/tester)"


def redirect_to(location):
    return lambda request: httpx.Response(302, headers={"location": location})


class TestGatewaySelection:
    """Test which gateway a Client is created with."""

    def test_anonymous(self):
        """Test no creds means anonymous requests."""
        client = Client(ClientOptions(user_agent=USER_AGENT))

        assert isinstance(client.gateway, AnonGateway)
        assert client.get_refresh_token() is None
        assert client.get_authorized_scopes() is None

    def test_app_only(self, creds):
        """Test creds without auth means application-only OAuth."""
        client = Client(ClientOptions(user_agent=USER_AGENT, creds=creds))

        assert isinstance(client.gateway, OauthGateway)
        assert client.gateway.initial_auth is None

    def test_user_auth(self, creds):
        """Test creds and auth authorize as the user."""
        auth = UsernameAuth(username="u", password="p")
        client = Client(ClientOptions(user_agent=USER_AGENT, creds=creds, auth=auth))

        assert isinstance(client.gateway, OauthGateway)
        assert client.gateway.initial_auth == auth

    def test_explicit_gateway(self):
        """Test a given gateway is used as is."""
        gateway = AnonGateway(USER_AGENT)
        client = Client(ClientOptions(user_agent=USER_AGENT), gateway=gateway)

        assert client.gateway is gateway

    def test_empty_user_agent_rejected(self):
        """Test the user agent is required."""
        with pytest.raises(ValueError):
            ClientOptions(user_agent="")


class TestMakeAuthUrl:
    """Test building the OAuth authorization URL."""

    def test_permanent(self):
        """Test all parameters are part of the URL."""
        url = Client.make_auth_url(
            "cId", ["identity", "read"], "https://example.com/cb", state="xyz"
        )

        parsed = urlparse(url)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == (
            "https://www.reddit.com/api/v1/authorize"
        )
        assert parse_qs(parsed.query) == {
            "client_id": ["cId"],
            "response_type": ["code"],
            "state": ["xyz"],
            "redirect_uri": ["https://example.com/cb"],
            "duration": ["permanent"],
            "scope": ["identity read"],
        }

    def test_temporary(self):
        """Test temporary authorizations."""
        url = Client.make_auth_url("cId", ["read"], "https://example.com/cb", temporary=True)

        assert parse_qs(urlparse(url).query)["duration"] == ["temporary"]


class TestRandomPost:
    """Test get_random_post_id."""

    @pytest.mark.asyncio
    async def test_random_post_id(self, make_http_client):
        """Test the ID is extracted from the redirect."""
        http, transport = make_http_client(
            redirect_to("https://www.reddit.com/r/python/comments/abc123/some_title/")
        )

        async with Client(ClientOptions(user_agent=USER_AGENT), http_client=http) as client:
            post_id = await client.get_random_post_id("python")

        assert post_id == "abc123"
        assert transport.requests[0].url.path == "/r/python/random.json"

    @pytest.mark.asyncio
    async def test_front_page(self, make_http_client):
        """Test without subreddit the front page is used."""
        http, transport = make_http_client(
            redirect_to("https://www.reddit.com/r/pics/comments/xyz/title/")
        )
        client = Client(ClientOptions(user_agent=USER_AGENT), http_client=http)

        assert await client.get_random_post_id() == "xyz"
        assert transport.requests[0].url.path == "/random.json"

    @pytest.mark.asyncio
    async def test_invalid_redirect(self, make_http_client):
        """Test a redirect elsewhere raises InvalidRedirectError."""
        http, _ = make_http_client(redirect_to("https://www.reddit.com/login/"))
        client = Client(ClientOptions(user_agent=USER_AGENT), http_client=http)

        with pytest.raises(InvalidRedirectError) as exc_info:
            await client.get_random_post_id("python")

        assert exc_info.value.location == "https://www.reddit.com/login/"

    @pytest.mark.asyncio
    async def test_no_redirect(self, make_http_client):
        """Test a regular response raises InvalidKindError."""
        http, _ = make_http_client(
            lambda request: httpx.Response(200, json={"kind": "Listing", "data": {}})
        )
        client = Client(ClientOptions(user_agent=USER_AGENT), http_client=http)

        with pytest.raises(InvalidKindError):
            await client.get_random_post_id("python")


class TestAuthCode:
    """Test Client.from_auth_code."""

    @pytest.mark.asyncio
    async def test_from_auth_code(self, make_http_client, creds):
        """Test the session is available after the exchange."""
        http, _ = make_http_client(
            lambda request: httpx.Response(
                200,
                json={
                    "access_token": "A1",
                    "expires_in": 3600,
                    "refresh_token": "R1",
                    "scope": "identity",
                },
            )
        )
        options = ClientOptions(user_agent=USER_AGENT, creds=creds)

        client = await Client.from_auth_code(
            options, "CODE", "https://example.com/cb", http_client=http
        )

        assert client.get_refresh_token() == "R1"
        assert client.get_authorized_scopes() == ["identity"]

    @pytest.mark.asyncio
    async def test_requires_creds(self):
        """Test auth codes cannot be exchanged without creds."""
        with pytest.raises(ConfigurationError):
            await Client.from_auth_code(
                ClientOptions(user_agent=USER_AGENT), "CODE", "https://example.com/cb"
            )


class TestListings:
    """Test listings created by the client."""

    @pytest.mark.asyncio
    async def test_get_listing(self, make_http_client):
        """Test pages are fetched through the client's gateway."""
        pages = [
            {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": {"id": "a"}}], "after": "t3_a"}},
            {"kind": "Listing", "data": {"children": [{"kind": "t3", "data": {"id": "b"}}], "after": None}},
        ]
        http, transport = make_http_client(
            lambda request: httpx.Response(200, json=pages[len(transport.requests) - 1])
        )
        client = Client(ClientOptions(user_agent=USER_AGENT), http_client=http)

        listing = client.get_listing(
            "r/python/new", lambda raw: raw["data"]["id"], {"t": "day"}
        )
        ids = [item async for item in listing]

        assert ids == ["a", "b"]
        first, second = transport.requests
        assert first.url.path == "/r/python/new.json"
        assert first.url.params["limit"] == "100"
        assert first.url.params["t"] == "day"
        assert second.url.params["after"] == "t3_a"

    def test_get_post_comments(self):
        """Test the post comments listing starts unfetched."""
        client = Client(ClientOptions(user_agent=USER_AGENT))

        comments = client.get_post_comments("abc123")

        assert isinstance(comments, CommentListing)
        assert comments.items == []
        assert comments.context.post == "abc123"
        assert comments.can_fetch_more() is True

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        """Test the rate limit is read from the gateway."""
        client = Client(ClientOptions(user_agent=USER_AGENT))
        assert client.rate_limit is None

        client.gateway.rate_limit_tracker.update(50, 60)

        assert client.rate_limit.remaining == 50
        await client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_closes_gateway(self):
        """Test closing the client closes its gateway."""
        client = Client(ClientOptions(user_agent=USER_AGENT))
        client.gateway.aclose = AsyncMock()

        await client.aclose()

        client.gateway.aclose.assert_awaited_once()


class TestFromEnv:
    """Test ClientOptions.from_env."""

    @patch.dict(os.environ, {"REDDIT_USER_AGENT": USER_AGENT}, clear=True)
    def test_user_agent_only(self):
        """Test anonymous options."""
        options = ClientOptions.from_env()

        assert options.user_agent == USER_AGENT
        assert options.creds is None
        assert options.auth is None

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_user_agent(self):
        """Test the user agent is required."""
        with pytest.raises(ConfigurationError, match="REDDIT_USER_AGENT"):
            ClientOptions.from_env()

    @patch.dict(
        os.environ,
        {"REDDIT_USER_AGENT": USER_AGENT, "REDDIT_CLIENT_ID": "cId"},
        clear=True,
    )
    def test_partial_creds(self):
        """Test client ID and secret must be set together."""
        with pytest.raises(ConfigurationError):
            ClientOptions.from_env()

    @patch.dict(
        os.environ,
        {
            "REDDIT_USER_AGENT": USER_AGENT,
            "REDDIT_CLIENT_ID": "cId",
            "REDDIT_CLIENT_SECRET": "cSecret",
            "REDDIT_USERNAME": "u",
            "REDDIT_PASSWORD": "p",
        },
        clear=True,
    )
    def test_username_auth(self):
        """Test username and password auth."""
        options = ClientOptions.from_env()

        assert options.creds == Credentials(client_id="cId", client_secret="cSecret")
        assert options.auth == UsernameAuth(username="u", password="p")

    @patch.dict(
        os.environ,
        {
            "REDDIT_USER_AGENT": USER_AGENT,
            "REDDIT_CLIENT_ID": "cId",
            "REDDIT_CLIENT_SECRET": "cSecret",
            "REDDIT_USERNAME": "u",
            "REDDIT_PASSWORD": "p",
            "REDDIT_REFRESH_TOKEN": "R0",
        },
        clear=True,
    )
    def test_refresh_token_preferred(self):
        """Test a refresh token wins over username and password."""
        options = ClientOptions.from_env()

        assert options.auth == TokenAuth(refresh_token="R0")
