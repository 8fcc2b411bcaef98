"""
Integration tests against the live Bitquery API.

Skipped unless BITQUERY_CLIENT_ID and BITQUERY_CLIENT_SECRET are set.
"""

import os

import pytest

from bitquery_toolkit import BitqueryClient, ResponseParser, get_token_balances, load_settings

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not (os.getenv("BITQUERY_CLIENT_ID") and os.getenv("BITQUERY_CLIENT_SECRET")),
        reason="Bitquery credentials not configured",
    ),
]

VITALIK = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


@pytest.mark.asyncio
async def test_authenticate():
    """Test a real token request."""
    async with BitqueryClient.from_settings(load_settings()) as client:
        token = await client.authenticate()

    assert token


@pytest.mark.asyncio
async def test_token_balances_envelope():
    """Test a template round trip returns a well-formed envelope."""
    async with BitqueryClient.from_settings(load_settings()) as client:
        result = await client.execute(get_token_balances(VITALIK, limit=1))

    assert isinstance(result.success, bool)
    if result.success:
        assert ResponseParser.validate_schema(result, {"ethereum": "object"})
    else:
        assert result.error_messages
