"""
Client configuration.

Options can be given directly or loaded from the environment:

- REDDIT_USER_AGENT (required)
- REDDIT_CLIENT_ID / REDDIT_CLIENT_SECRET: app credentials; without them
  requests are anonymous
- REDDIT_REFRESH_TOKEN, or REDDIT_USERNAME / REDDIT_PASSWORD: the user to act
  as; without them the client uses application-only OAuth
"""

import os
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from snoots.exceptions import ConfigurationError
from snoots.gateway.types import Credentials, TokenAuth, UsernameAuth
from snoots.utils.logger import get_logger

logger = get_logger(__name__)


class ClientOptions(BaseModel):
    """
    Options for instantiating a Client.

    Every Reddit application is required to send a unique, descriptive user
    agent, e.g. ``<platform>:<app ID>:<version> (by /u/<username>)``.
    """

    model_config = ConfigDict(frozen=True)

    user_agent: str = Field(..., min_length=1, description="The unique user agent")
    creds: Optional[Credentials] = Field(
        None,
        description="App credentials; anonymous requests are made without them",
    )
    auth: Optional[Union[TokenAuth, UsernameAuth]] = Field(
        None,
        description="The user to authorize as; application-only OAuth without it",
    )

    @classmethod
    def from_env(cls) -> "ClientOptions":
        """
        Load options from environment variables.

        Raises:
            ConfigurationError: If REDDIT_USER_AGENT is missing or only one
                of the client ID and secret is set
        """
        user_agent = os.getenv("REDDIT_USER_AGENT")
        if not user_agent:
            logger.error("REDDIT_USER_AGENT environment variable not set")
            raise ConfigurationError("REDDIT_USER_AGENT is required")

        client_id = os.getenv("REDDIT_CLIENT_ID")
        client_secret = os.getenv("REDDIT_CLIENT_SECRET")
        if bool(client_id) != bool(client_secret):
            raise ConfigurationError(
                "REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET must be set together"
            )

        creds = None
        if client_id and client_secret:
            creds = Credentials(client_id=client_id, client_secret=client_secret)

        auth: Optional[Union[TokenAuth, UsernameAuth]] = None
        refresh_token = os.getenv("REDDIT_REFRESH_TOKEN")
        username = os.getenv("REDDIT_USERNAME")
        password = os.getenv("REDDIT_PASSWORD")
        if refresh_token:
            auth = TokenAuth(refresh_token=refresh_token)
        elif username and password:
            auth = UsernameAuth(username=username, password=password)

        logger.info(
            "client_options_loaded",
            has_creds=creds is not None,
            auth_type=type(auth).__name__ if auth else None,
        )

        return cls(user_agent=user_agent, creds=creds, auth=auth)
