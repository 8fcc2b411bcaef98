"""
Bitquery GraphQL API client.

This module sends GraphQL documents to the Bitquery endpoint with an OAuth
bearer token and a fixed-delay retry policy, and normalizes what comes back
into :class:`~bitquery_toolkit.graphql.models.ResponseEnvelope` values.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Mapping, Optional

import aiohttp

from .auth import OAuth2Auth, OAuth2Config
from .config import ClientConfig, Settings
from .exceptions import (
    BitqueryError,
    ConfigurationError,
    ErrorHandler,
    HTTPError,
    RetryableHTTPError,
)
from .graphql.models import QueryDocument, ResponseEnvelope
from .graphql.parser import ResponseParser
from .retry import RetryHandler

logger = logging.getLogger(__name__)

NETWORK_ERROR = "NETWORK_ERROR"


class BitqueryClient:
    """
    Async client for the Bitquery GraphQL API.

    Authentication happens lazily on the first request and the token is kept
    for the lifetime of the client. Transport failures and upstream GraphQL
    errors are returned as error envelopes; only authentication failures
    raise.

    Examples:
        ```python
        async with BitqueryClient("client-id", "client-secret") as client:
            result = await client.execute(get_token_balances("0xabc"))
            if result.success:
                balances = result.get_data("ethereum.address.0.balances")
        ```
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        config: Optional[ClientConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize the client.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            config: Transport configuration
            session: Session to use; the client opens and owns one when omitted
        """
        self.config = config or ClientConfig()
        self._session = session
        self._owns_session = session is None
        self._retry_handler = RetryHandler(self.config.retry)
        self._auth = OAuth2Auth(
            OAuth2Config(
                client_id=client_id,
                client_secret=client_secret,
                token_url=self.config.token_url,
                scope=self.config.scope,
                timeout=self.config.timeout,
            ),
            session=session,
        )

    @classmethod
    def from_settings(
        cls, settings: Settings, session: Optional[aiohttp.ClientSession] = None
    ) -> BitqueryClient:
        """
        Create a client from loaded settings.

        Raises:
            ConfigurationError: If credentials are missing
        """
        if not settings.client_id or settings.client_secret is None:
            raise ConfigurationError(
                "BITQUERY_CLIENT_ID and BITQUERY_CLIENT_SECRET must be configured"
            )

        return cls(
            settings.client_id,
            settings.client_secret.get_secret_value(),
            config=settings.client,
            session=session,
        )

    async def __aenter__(self) -> BitqueryClient:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Content-Type": "application/json"}
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if the client opened it."""
        if self._owns_session and self._session is not None:
            if not self._session.closed:
                await self._session.close()
            self._session = None

    async def authenticate(self) -> str:
        """
        Get the access token, requesting it on first use.

        Concurrent first calls share a single token request.

        Returns:
            Access token

        Raises:
            AuthenticationError: If the token request fails
        """
        result = await self._auth.get_auth_data()
        return result.access_token

    @property
    def is_authenticated(self) -> bool:
        """Check whether a token has been obtained."""
        return self._auth.is_authenticated

    async def send(
        self, query: str, variables: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Send a GraphQL document and return the raw decoded response.

        Args:
            query: GraphQL document text
            variables: Variable values

        Returns:
            Decoded JSON body, or a ``{"data": None, "errors": [...]}`` payload
            describing the transport failure

        Raises:
            AuthenticationError: If the token request fails
        """
        token = await self.authenticate()
        payload = {"query": query, "variables": dict(variables or {})}

        logger.debug("Sending GraphQL query: %s variables=%s", query, payload["variables"])

        try:
            response = await self._retry_handler.execute_with_retry(
                self._post, payload, token, operation_name="GraphQL request"
            )
        except RetryableHTTPError as e:
            logger.error("Network error: %s", ErrorHandler.summarize(e))
            return self._network_error(e, status=e.status_code)
        except HTTPError as e:
            logger.error("API error: %s", ErrorHandler.summarize(e))
            return self._http_error(e)
        except BitqueryError as e:
            logger.error("Network error: %s", ErrorHandler.summarize(e))
            return self._network_error(e)

        if response.get("errors"):
            logger.warning("GraphQL errors: %s", response["errors"])

        return response

    async def query(
        self, query: str, variables: Optional[Mapping[str, Any]] = None
    ) -> ResponseEnvelope:
        """
        Execute a GraphQL document and parse the response.

        Args:
            query: GraphQL document text
            variables: Variable values

        Returns:
            ResponseEnvelope for the call

        Raises:
            AuthenticationError: If the token request fails
        """
        await self.authenticate()
        raw = await self.send(query, variables)
        return ResponseParser.parse(raw)

    async def execute(self, document: QueryDocument) -> ResponseEnvelope:
        """Execute a document produced by the builder or a template."""
        return await self.query(document.query, document.variables)

    async def _post(self, payload: Dict[str, Any], token: str) -> Dict[str, Any]:
        """Perform a single POST attempt, raising toolkit errors on failure."""
        session = await self._get_session()
        url = self.config.endpoint

        try:
            async with session.post(
                url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            ) as response:
                text = await response.text(errors="replace")
                body = _decode_json(text)

                if not 200 <= response.status < 300:
                    raise ErrorHandler.handle_http_status_error(
                        response.status,
                        f"HTTP {response.status}",
                        url=url,
                        response_text=text,
                        response_data=body,
                        retry_on=self.config.retry.retry_on_status_codes,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ErrorHandler.handle_aiohttp_error(e, url) from e

        if not isinstance(body, dict):
            raise BitqueryError("Invalid JSON in GraphQL response", url=url)

        return body

    @staticmethod
    def _http_error(error: HTTPError) -> Dict[str, Any]:
        body = error.response_data if error.response_data is not None else error.response_text
        upstream_errors = body.get("errors") if isinstance(body, dict) else None

        return {
            "data": None,
            "errors": [
                {
                    "message": f"API Error: {error.status_code} - {json.dumps(upstream_errors)}",
                    "extensions": {"code": error.status_code, "response": body},
                }
            ],
        }

    @staticmethod
    def _network_error(error: BitqueryError, status: Optional[int] = None) -> Dict[str, Any]:
        extensions: Dict[str, Any] = {"code": NETWORK_ERROR}
        if status is not None:
            extensions["status"] = status

        return {
            "data": None,
            "errors": [{"message": error.message, "extensions": extensions}],
        }


def _decode_json(text: str) -> Any:
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None
