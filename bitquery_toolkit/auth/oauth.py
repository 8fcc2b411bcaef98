"""
OAuth 2.0 client-credentials authentication.

This module exchanges a client id and secret for a bearer token at the
Bitquery OAuth token endpoint and caches the result.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import aiohttp
from pydantic import BaseModel, Field, HttpUrl, SecretStr

from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URL = "https://oauth2.bitquery.io/oauth2/token"


class GrantType(str, Enum):
    """OAuth 2.0 grant types."""

    CLIENT_CREDENTIALS = "client_credentials"


@dataclass
class AuthResult:
    """Result of a token request."""

    success: bool
    access_token: Optional[str] = None
    token_type: str = "Bearer"
    headers: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None


class OAuth2Config(BaseModel):
    """Configuration for OAuth 2.0 client-credentials authentication."""

    token_url: HttpUrl = Field(
        default=DEFAULT_TOKEN_URL, description="OAuth token endpoint URL"
    )
    client_id: str = Field(description="OAuth client ID")
    client_secret: SecretStr = Field(description="OAuth client secret")
    grant_type: GrantType = Field(
        default=GrantType.CLIENT_CREDENTIALS, description="OAuth grant type"
    )
    scope: Optional[str] = Field(default="api", description="OAuth scope")
    timeout: float = Field(
        default=30.0, gt=0, description="Token request timeout in seconds"
    )


class OAuth2Auth:
    """
    OAuth 2.0 client-credentials authentication method.

    Callers go through :meth:`get_auth_data`, which requests the token once
    and reuses it for the lifetime of the instance. Concurrent first calls
    share a single token request. The token endpoint is called a single time
    per attempt; failures are not retried and not cached.

    Examples:
        ```python
        config = OAuth2Config(client_id="your-client-id", client_secret="your-secret")
        auth = OAuth2Auth(config)
        result = await auth.get_auth_data()
        headers = result.headers  # {"Authorization": "Bearer ..."}
        ```
    """

    def __init__(
        self, config: OAuth2Config, session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize OAuth 2.0 authentication.

        Args:
            config: OAuth 2.0 configuration
            session: Session to send the token request with; a short-lived
                session is opened per request when omitted
        """
        self.config = config
        self._session = session
        self._cached_result: Optional[AuthResult] = None
        self._lock = asyncio.Lock()

    async def get_auth_data(self, force_refresh: bool = False) -> AuthResult:
        """
        Get authentication data, using the cache when it holds a valid result.

        Args:
            force_refresh: Request a new token even if one is cached

        Returns:
            AuthResult containing authentication data

        Raises:
            AuthenticationError: If the token request fails
        """
        if not force_refresh and self.is_authenticated:
            return self._cached_result

        async with self._lock:
            # Another caller may have finished while we waited for the lock.
            if not force_refresh and self.is_authenticated:
                return self._cached_result

            result = await self.authenticate()
            self._cached_result = result

        return result

    def clear_cache(self) -> None:
        """Clear cached authentication data."""
        self._cached_result = None

    @property
    def is_authenticated(self) -> bool:
        """Check if currently holding a cached token."""
        return self._cached_result is not None and self._cached_result.success

    async def authenticate(self) -> AuthResult:
        """
        Request an access token.

        Returns:
            AuthResult containing the access token and bearer header

        Raises:
            AuthenticationError: If the request fails or returns no token
        """
        token_data = self._prepare_token_request()

        try:
            if self._session is not None and not self._session.closed:
                response_data = await self._request_token(self._session, token_data)
            else:
                async with aiohttp.ClientSession() as session:
                    response_data = await self._request_token(session, token_data)
        except AuthenticationError as e:
            logger.error("Authentication error: %s", e.message)
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error("Authentication error: %s", e)
            raise AuthenticationError(
                "Failed to authenticate with Bitquery API",
                url=str(self.config.token_url),
                original_error=e,
            ) from e

        token_type = response_data.get("token_type") or "Bearer"
        access_token = response_data["access_token"]

        return AuthResult(
            success=True,
            access_token=access_token,
            headers={"Authorization": f"Bearer {access_token}"},
            token_type=token_type,
        )

    def _prepare_token_request(self) -> Dict[str, str]:
        data = {
            "grant_type": GrantType(self.config.grant_type).value,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret.get_secret_value(),
        }
        if self.config.scope:
            data["scope"] = self.config.scope
        return data

    async def _request_token(
        self, session: aiohttp.ClientSession, data: Dict[str, str]
    ) -> Dict[str, Any]:
        """Make token request to OAuth server."""
        url = str(self.config.token_url)

        async with session.post(
            url,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=aiohttp.ClientTimeout(total=self.config.timeout),
        ) as response:
            if response.status != 200:
                error_text = await response.text(errors="replace")
                raise AuthenticationError(
                    f"Token request failed: {response.status} - {error_text}",
                    url=url,
                    status_code=response.status,
                )

            response_data = await response.json(content_type=None)

            if not isinstance(response_data, dict) or not response_data.get("access_token"):
                raise AuthenticationError(
                    "Access token not found in response",
                    url=url,
                    status_code=response.status,
                )

            return response_data

    @property
    def access_token(self) -> Optional[str]:
        """Get current access token."""
        return self._cached_result.access_token if self._cached_result else None
