"""
Tests for the Bitquery API client.
"""

import asyncio
import logging

import aiohttp
import pytest
from yarl import URL

from bitquery_toolkit import (
    NETWORK_ERROR,
    AuthenticationError,
    BitqueryClient,
    ConfigurationError,
    Settings,
    get_token_balances,
)
from bitquery_toolkit.auth import DEFAULT_TOKEN_URL
from bitquery_toolkit.config import DEFAULT_ENDPOINT

QUERY = "query { test }"


def _requests_to(mock_http, url):
    return mock_http.requests.get(("POST", URL(url)), [])


@pytest.fixture
def client(client_config) -> BitqueryClient:
    return BitqueryClient("test-client-id", "test-client-secret", config=client_config)


class TestAuthentication:
    """Test token handling in the client."""

    @pytest.mark.asyncio
    async def test_authenticate_returns_token(self, client, mock_http, token_payload):
        """Test authenticate() yields the access token."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)

        token = await client.authenticate()

        assert token == token_payload["access_token"]
        assert client.is_authenticated is True
        await client.close()

    @pytest.mark.asyncio
    async def test_token_cached_across_queries(
        self, client, mock_http, token_payload, sample_response
    ):
        """Test one token request serves many queries."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(DEFAULT_ENDPOINT, payload=sample_response, repeat=True)

        await client.query(QUERY)
        await client.query(QUERY)

        assert len(_requests_to(mock_http, DEFAULT_TOKEN_URL)) == 1
        assert len(_requests_to(mock_http, DEFAULT_ENDPOINT)) == 2
        await client.close()

    @pytest.mark.asyncio
    async def test_concurrent_queries_share_token_request(
        self, client, mock_http, token_payload, sample_response
    ):
        """Test concurrent first calls make a single token request."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(DEFAULT_ENDPOINT, payload=sample_response, repeat=True)

        results = await asyncio.gather(client.query(QUERY), client.query(QUERY), client.query(QUERY))

        assert all(result.success for result in results)
        assert len(_requests_to(mock_http, DEFAULT_TOKEN_URL)) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_authentication_failure_raises(self, client, mock_http):
        """Test authentication errors propagate from query()."""
        mock_http.post(DEFAULT_TOKEN_URL, status=401, body="invalid_client")

        with pytest.raises(AuthenticationError):
            await client.query(QUERY)

        assert _requests_to(mock_http, DEFAULT_ENDPOINT) == []
        await client.close()

    @pytest.mark.asyncio
    async def test_token_endpoint_not_retried(self, client, mock_http):
        """Test the token request is attempted once even on a retryable status."""
        mock_http.post(DEFAULT_TOKEN_URL, status=503, repeat=True)

        with pytest.raises(AuthenticationError):
            await client.authenticate()

        assert len(_requests_to(mock_http, DEFAULT_TOKEN_URL)) == 1
        await client.close()


class TestQuery:
    """Test query execution."""

    @pytest.mark.asyncio
    async def test_successful_query(self, client, mock_http, token_payload, sample_response):
        """Test request shape and parsed envelope."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(DEFAULT_ENDPOINT, payload=sample_response)

        result = await client.query(QUERY, {"var": "test"})

        assert result.success is True
        assert result.data == sample_response["data"]
        assert result.errors is None

        request = _requests_to(mock_http, DEFAULT_ENDPOINT)[0]
        assert request.kwargs["json"] == {"query": QUERY, "variables": {"var": "test"}}
        assert request.kwargs["headers"]["Authorization"] == f"Bearer {token_payload['access_token']}"
        assert request.kwargs["headers"]["Content-Type"] == "application/json"
        await client.close()

    @pytest.mark.asyncio
    async def test_execute_document(self, client, mock_http, token_payload, sample_response):
        """Test executing a template document."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(DEFAULT_ENDPOINT, payload=sample_response)

        document = get_token_balances("0xabc", limit=5)
        result = await client.execute(document)

        assert result.get_data("ethereum.address.0.balances.0.currency.symbol") == "ETH"
        request = _requests_to(mock_http, DEFAULT_ENDPOINT)[0]
        assert request.kwargs["json"] == document.to_dict()
        await client.close()

    @pytest.mark.asyncio
    async def test_graphql_errors_returned(self, client, mock_http, token_payload, caplog):
        """Test upstream GraphQL errors are surfaced, not raised."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(
            DEFAULT_ENDPOINT,
            payload={"errors": [{"message": "GraphQL Error", "path": ["test"]}]},
        )

        with caplog.at_level(logging.WARNING, logger="bitquery_toolkit.client"):
            result = await client.query(QUERY)

        assert result.success is False
        assert result.data is None
        assert result.errors[0]["message"] == "GraphQL Error"
        assert result.errors[0]["path"] == ["test"]
        assert "GraphQL errors" in caplog.text
        await client.close()

    @pytest.mark.asyncio
    async def test_send_returns_raw_body(self, client, mock_http, token_payload, sample_response):
        """Test send() does not normalize the body."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(DEFAULT_ENDPOINT, payload=sample_response)

        raw = await client.send(QUERY)

        assert raw == sample_response
        await client.close()


class TestTransportErrors:
    """Test retry policy and transport error payloads."""

    @pytest.mark.asyncio
    async def test_retries_until_success(self, client, mock_http, token_payload, sample_response):
        """Test three 503 responses followed by a success."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        for _ in range(3):
            mock_http.post(DEFAULT_ENDPOINT, status=503)
        mock_http.post(DEFAULT_ENDPOINT, payload=sample_response)

        result = await client.query(QUERY)

        assert result.success is True
        assert result.data == sample_response["data"]
        assert len(_requests_to(mock_http, DEFAULT_ENDPOINT)) == 4
        await client.close()

    @pytest.mark.asyncio
    async def test_retries_exhausted(self, client, mock_http, token_payload):
        """Test exhausted retries surface a NETWORK_ERROR envelope."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(DEFAULT_ENDPOINT, status=503, repeat=True)

        result = await client.query(QUERY)

        assert result.success is False
        assert result.data is None
        assert result.error_codes == [NETWORK_ERROR]
        assert result.errors[0]["extensions"]["status"] == 503
        assert len(_requests_to(mock_http, DEFAULT_ENDPOINT)) == 4
        await client.close()

    @pytest.mark.asyncio
    async def test_non_retryable_status(self, client, mock_http, token_payload):
        """Test a 400 response is reported with its status code."""
        body = {"errors": [{"message": "Bad Request"}]}
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(DEFAULT_ENDPOINT, status=400, payload=body)

        result = await client.query(QUERY)

        assert result.success is False
        error = result.errors[0]
        assert error["message"].startswith("API Error: 400 - ")
        assert "Bad Request" in error["message"]
        assert error["extensions"] == {"code": 400, "response": body}
        assert len(_requests_to(mock_http, DEFAULT_ENDPOINT)) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_connection_error(self, client, mock_http, token_payload):
        """Test connection failures are retried and reported as NETWORK_ERROR."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(
            DEFAULT_ENDPOINT,
            exception=aiohttp.ClientConnectionError("Connection refused"),
            repeat=True,
        )

        result = await client.query(QUERY)

        assert result.error_codes == [NETWORK_ERROR]
        assert "Connection refused" in result.errors[0]["message"]
        assert len(_requests_to(mock_http, DEFAULT_ENDPOINT)) == 4
        await client.close()

    @pytest.mark.asyncio
    async def test_invalid_json_body(self, client, mock_http, token_payload):
        """Test an unparseable success body is not retried."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(DEFAULT_ENDPOINT, status=200, body="<html>oops</html>")

        result = await client.query(QUERY)

        assert result.error_codes == [NETWORK_ERROR]
        assert len(_requests_to(mock_http, DEFAULT_ENDPOINT)) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_undecodable_gateway_body(self, client, mock_http, token_payload):
        """Test a non-UTF-8 gateway page is retried and reported, not raised."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(
            DEFAULT_ENDPOINT,
            status=502,
            body=b"\xff\xfe bad gateway",
            content_type="text/html; charset=utf-8",
            repeat=True,
        )

        result = await client.query(QUERY)

        assert result.success is False
        assert result.error_codes == [NETWORK_ERROR]
        assert result.errors[0]["extensions"]["status"] == 502
        assert len(_requests_to(mock_http, DEFAULT_ENDPOINT)) == 4
        await client.close()

    @pytest.mark.asyncio
    async def test_undecodable_error_body(self, client, mock_http, token_payload):
        """Test a non-UTF-8 body on a non-retryable status keeps its text."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(
            DEFAULT_ENDPOINT,
            status=400,
            body=b"\xff bad request",
            content_type="text/plain; charset=utf-8",
        )

        result = await client.query(QUERY)

        error = result.errors[0]
        assert error["extensions"]["code"] == 400
        assert error["extensions"]["response"].endswith("bad request")
        await client.close()


class TestLifecycle:
    """Test construction and session ownership."""

    def test_from_settings(self):
        """Test building a client from settings."""
        settings = Settings(client_id="id", client_secret="secret")
        client = BitqueryClient.from_settings(settings)

        assert client.config == settings.client

    def test_from_settings_requires_credentials(self):
        """Test missing credentials are a configuration error."""
        with pytest.raises(ConfigurationError):
            BitqueryClient.from_settings(Settings())

    @pytest.mark.asyncio
    async def test_external_session_left_open(self, client_config, mock_http, token_payload):
        """Test a caller-provided session is not closed by the client."""
        mock_http.post(DEFAULT_TOKEN_URL, payload=token_payload)
        mock_http.post(DEFAULT_ENDPOINT, payload={"data": {"ok": True}})

        async with aiohttp.ClientSession() as session:
            async with BitqueryClient("id", "secret", config=client_config, session=session) as client:
                result = await client.query(QUERY)

            assert result.data == {"ok": True}
            assert session.closed is False
