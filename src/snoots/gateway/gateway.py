"""
The gateway to the Reddit API.

A Gateway turns ``get``/``post``/``post_json`` calls into authenticated HTTP
requests, normalizes redirects into ordinary data, keeps track of the rate
limit and unwraps Reddit's error envelopes. Subclasses only decide which host
to talk to, how paths are mapped and how a request is authenticated.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from snoots.exceptions import RedditResponseError
from snoots.utils.logger import get_logger

from .rate_limit import RateLimitTracker
from .types import Auth, BasicAuth, BearerAuth, Data, Query, RateLimit

REDIRECT_KIND = "snoots_redirect"
DEFAULT_TIMEOUT = 30.0


class Gateway(ABC):
    """
    Base class for all gateways.

    You shouldn't have to use this directly. The resource layer calls
    ``get``, ``post`` and ``post_json`` with API paths and raw data.

    Attributes:
        endpoint: Base URL requests are sent to
        user_agent: User agent sent with every request
        rate_limit_tracker: Last known rate limit state of this gateway
    """

    def __init__(
        self,
        endpoint: str,
        user_agent: str,
        http_client: Optional[httpx.AsyncClient] = None,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            endpoint: Base URL (e.g. "https://oauth.reddit.com")
            user_agent: The unique user agent of the application
            http_client: Optional HTTP client to share; one is created (and
                owned) by the gateway otherwise
            logger: Optional logger; each gateway binds its own name to it
        """
        self.endpoint = endpoint.rstrip("/")
        self.user_agent = user_agent
        self.rate_limit_tracker = RateLimitTracker()
        self.logger = (logger or get_logger(__name__)).bind(
            gateway=type(self).__name__
        )

        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            follow_redirects=False,
            timeout=DEFAULT_TIMEOUT,
        )

    async def get(self, path: str, query: Optional[Query] = None) -> Any:
        """
        Issue a GET request to the Reddit API.

        Args:
            path: The API path, e.g. "r/python/hot"
            query: Additional query parameters

        Returns:
            The unwrapped response body

        Raises:
            RedditResponseError: If Reddit reported an error
            httpx.HTTPError: On transport errors or non-2xx, non-3xx statuses
        """
        return await self._request("GET", path, query)

    async def post(
        self,
        path: str,
        form: Optional[Data] = None,
        query: Optional[Query] = None,
    ) -> Any:
        """
        Issue a POST request with x-www-form-urlencoded data.

        Args:
            path: The API path
            form: The form fields to send
            query: Additional query parameters

        Returns:
            The unwrapped response body
        """
        body = {"api_type": "json", **(form or {})}
        return await self._request(
            "POST", path, query, data=_drop_none(body)
        )

    async def post_json(
        self,
        path: str,
        json: Optional[Data] = None,
        query: Optional[Query] = None,
    ) -> Any:
        """
        Issue a POST request with a JSON body.

        Args:
            path: The API path
            json: The data to send
            query: Additional query parameters

        Returns:
            The unwrapped response body
        """
        body = {"api_type": "json", **(json or {})}
        return await self._request("POST", path, query, json=body)

    def get_rate_limit(self) -> Optional[RateLimit]:
        """Get the last known rate limit of this gateway."""
        return self.rate_limit_tracker.current

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this gateway created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "Gateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @abstractmethod
    async def auth(self) -> Optional[Auth]:
        """Resolve the credentials for the next request."""

    @abstractmethod
    def map_path(self, path: str) -> str:
        """Map an API path to the path used on this gateway's host."""

    def url_for(self, path: str) -> str:
        return f"{self.endpoint}/{self.map_path(path.lstrip('/'))}"

    async def build_opts(self, query: Optional[Query]) -> Dict[str, Any]:
        """
        Build the httpx request options for a call.

        This awaits ``auth()``, which for OAuth may refresh the access token
        before the request is sent.
        """
        params = _drop_none({**(query or {}), "raw_json": 1, "api_type": "json"})
        opts: Dict[str, Any] = {
            "headers": {"user-agent": self.user_agent},
            "params": params,
        }

        auth = await self.auth()
        if isinstance(auth, BearerAuth):
            opts["headers"]["Authorization"] = f"bearer {auth.bearer}"
        elif isinstance(auth, BasicAuth):
            opts["auth"] = httpx.BasicAuth(auth.user, auth.password)

        return opts

    def unwrap(self, res: Any) -> Any:
        """
        Unwrap one of Reddit's response envelopes.

        Reddit uses three shapes:
        - a plain value, returned as is
        - ``{"json": {"errors": [...], "data": ...}}``
        - ``{"error": ..., "error_description": ...}``

        Raises:
            RedditResponseError: If the response carries an error
        """
        if not isinstance(res, dict):
            return res

        if "json" in res:
            envelope = res["json"] or {}
            errors = envelope.get("errors") or []
            if errors:
                raise _json_error(errors[0])
            return envelope.get("data")

        if "error" in res:
            raise RedditResponseError(res["error"], res.get("error_description"))

        return res

    def transform_redirect(self, response: httpx.Response) -> Optional[Data]:
        """
        Turn a redirect into a typed object.

        Endpoints like ``r/<sub>/random`` answer with a 302 to the actual
        item. Instead of following it, the location is handed back as
        ``{"kind": "snoots_redirect", "data": {"location": ...}}``.
        """
        location = response.headers.get("location")
        if 300 <= response.status_code < 400 and location:
            return {"kind": REDIRECT_KIND, "data": {"location": location}}
        return None

    def update_rate_limit(self, response: httpx.Response) -> None:
        self.rate_limit_tracker.update_from_headers(response.headers)

    async def _request(
        self,
        method: str,
        path: str,
        query: Optional[Query],
        **kwargs: Any,
    ) -> Any:
        opts = await self.build_opts(query)
        url = self.url_for(path)

        self.logger.debug("request_sent", method=method, path=path)

        response = await self._http.request(method, url, **opts, **kwargs)
        body = self._shape_response(response)

        self.logger.debug(
            "response_received",
            method=method,
            path=path,
            status_code=response.status_code,
        )

        try:
            return self.unwrap(body)
        except RedditResponseError as e:
            self.logger.warning(
                "reddit_error_response",
                method=method,
                path=path,
                error=e.message,
            )
            raise

    def _shape_response(self, response: httpx.Response) -> Any:
        redirect = self.transform_redirect(response)
        self.update_rate_limit(response)

        if redirect is not None:
            return redirect

        response.raise_for_status()
        return response.json()


def _json_error(error: Any) -> RedditResponseError:
    # New-style errors are lists like ["RATELIMIT", "you are doing that too much", "ratelimit"].
    if isinstance(error, (list, tuple)) and error:
        description = error[1] if len(error) > 1 and error[1] else None
        return RedditResponseError(error[0], description)
    return RedditResponseError(error)


def _drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}
