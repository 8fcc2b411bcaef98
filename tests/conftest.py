"""
Shared test fixtures and configuration for the bitquery_toolkit test suite.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from aioresponses import aioresponses

from bitquery_toolkit import ClientConfig, RetryPolicy
from bitquery_toolkit.auth import DEFAULT_TOKEN_URL
from bitquery_toolkit.config import DEFAULT_ENDPOINT

TOKEN_URL = DEFAULT_TOKEN_URL
ENDPOINT = DEFAULT_ENDPOINT
ACCESS_TOKEN = "test-access-token-0123456789"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def client_config() -> ClientConfig:
    """Client configuration with immediate retries."""
    return ClientConfig(retry=RetryPolicy(max_retries=3, retry_delay=0))


@pytest.fixture
def mock_http() -> Generator[aioresponses, None, None]:
    """Intercept aiohttp requests."""
    with aioresponses() as m:
        yield m


@pytest.fixture
def token_payload() -> dict:
    """Successful OAuth token response."""
    return {"access_token": ACCESS_TOKEN, "token_type": "Bearer", "expires_in": 3600}


@pytest.fixture
def sample_response() -> dict:
    """A successful GraphQL response body."""
    return {
        "data": {
            "ethereum": {
                "address": [
                    {
                        "balances": [
                            {
                                "currency": {"symbol": "ETH", "decimals": 18},
                                "value": 1.5,
                            },
                            {
                                "currency": {"symbol": "USDT", "decimals": 6},
                                "value": 250.0,
                            },
                        ]
                    }
                ]
            }
        }
    }
