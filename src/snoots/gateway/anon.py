"""Gateway for unauthenticated, read-only requests."""

from typing import Any, Optional

from .gateway import Gateway

WWW_ENDPOINT = "https://www.reddit.com"


class AnonGateway(Gateway):
    """
    Gateway that sends no credentials at all.

    Requests go to www.reddit.com, which needs ``.json`` appended to every
    path and only serves public data.
    """

    def __init__(self, user_agent: str, **kwargs: Any) -> None:
        super().__init__(WWW_ENDPOINT, user_agent, **kwargs)

    async def auth(self) -> Optional[Any]:
        return None

    def map_path(self, path: str) -> str:
        return f"{path}.json"
