"""
Authentication for bitquery_toolkit.

Bitquery issues bearer tokens through the OAuth 2.0 client-credentials flow.
"""

from .oauth import DEFAULT_TOKEN_URL, AuthResult, GrantType, OAuth2Auth, OAuth2Config

__all__ = [
    "AuthResult",
    "DEFAULT_TOKEN_URL",
    "GrantType",
    "OAuth2Auth",
    "OAuth2Config",
]
