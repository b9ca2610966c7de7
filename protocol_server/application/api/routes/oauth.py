"""
OAuth Routes
============

Discovery metadata plus placeholder authorize/token endpoints. No grant flow
is implemented: the token endpoint always issues the same demo bearer token,
and nothing in the server ever verifies it.
"""

from fastapi import APIRouter, Request

from protocol_server.core.config.constants import (
    OAUTH_AUTH_METHODS,
    OAUTH_GRANT_TYPES,
    OAUTH_RESPONSE_TYPES,
    OAUTH_SCOPES,
)
from protocol_server.core.logging.logger import get_logger

router = APIRouter(tags=["OAuth"])
logger = get_logger(__name__)

DEMO_ACCESS_TOKEN = "demo_access_token"
DEMO_TOKEN_LIFETIME_SECONDS = 3600


@router.get("/.well-known/oauth-authorization-server")
async def oauth_server_metadata(request: Request) -> dict:
    """Authorization server metadata; every URL is rooted at the request's base URL."""
    base_url = str(request.base_url).rstrip("/")
    logger.info("oauth_metadata_requested", base_url=base_url)

    return {
        "issuer": base_url,
        "authorization_endpoint": f"{base_url}/oauth/authorize",
        "token_endpoint": f"{base_url}/oauth/token",
        "token_endpoint_auth_methods_supported": list(OAUTH_AUTH_METHODS),
        "revocation_endpoint": f"{base_url}/oauth/revoke",
        "revocation_endpoint_auth_methods_supported": list(OAUTH_AUTH_METHODS),
        "grant_types_supported": list(OAUTH_GRANT_TYPES),
        "response_types_supported": list(OAUTH_RESPONSE_TYPES),
        "scopes_supported": list(OAUTH_SCOPES),
    }


@router.get("/oauth/authorize")
async def authorize() -> dict:
    logger.info("oauth_authorize_requested")
    return {"message": "OAuth Authorization Endpoint"}


@router.post("/oauth/token")
async def token() -> dict:
    logger.info("oauth_token_requested")
    return {
        "access_token": DEMO_ACCESS_TOKEN,
        "token_type": "Bearer",
        "expires_in": DEMO_TOKEN_LIFETIME_SECONDS,
        "scope": " ".join(OAUTH_SCOPES),
    }
