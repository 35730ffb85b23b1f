"""Gateway authenticating with the application's own credentials."""

from typing import Any

from .anon import WWW_ENDPOINT
from .gateway import Gateway
from .types import BasicAuth, Credentials


class CredsGateway(Gateway):
    """
    Gateway using HTTP basic auth with the app's client ID and secret.

    This is what exchanges OAuth grants for access tokens.
    """

    def __init__(self, creds: Credentials, user_agent: str, **kwargs: Any) -> None:
        super().__init__(WWW_ENDPOINT, user_agent, **kwargs)
        self.creds = creds

    async def auth(self) -> BasicAuth:
        return BasicAuth(user=self.creds.client_id, password=self.creds.client_secret)

    def map_path(self, path: str) -> str:
        return f"{path}.json"
