"""
Gateways to the Reddit API.

- AnonGateway: unauthenticated requests against www.reddit.com
- CredsGateway: HTTP basic auth with the application credentials
- OauthGateway: bearer tokens against oauth.reddit.com
"""

from snoots.gateway.anon import AnonGateway
from snoots.gateway.creds import CredsGateway
from snoots.gateway.gateway import REDIRECT_KIND, Gateway
from snoots.gateway.oauth import OauthGateway
from snoots.gateway.rate_limit import RateLimitTracker
from snoots.gateway.types import (
    BasicAuth,
    BearerAuth,
    ClientAuth,
    Credentials,
    RateLimit,
    Token,
    TokenAuth,
    TokenResponse,
    UsernameAuth,
)

__all__ = [
    "AnonGateway",
    "CredsGateway",
    "Gateway",
    "OauthGateway",
    "REDIRECT_KIND",
    "RateLimitTracker",
    "BasicAuth",
    "BearerAuth",
    "ClientAuth",
    "Credentials",
    "RateLimit",
    "Token",
    "TokenAuth",
    "TokenResponse",
    "UsernameAuth",
]
