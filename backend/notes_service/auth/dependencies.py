"""
Notes Service — Bearer Token Guard
====================================

What:  FastAPI dependency protecting the /api/notes routes.
How:   Reads `Authorization: Bearer <token>`, hands the token to the TokenVerifier
       stored on app.state, and either attaches the claims to request.state or
       raises AuthenticationError (→ 401).

Two fixed failure messages only:
    - header missing / not a Bearer credential → "Missing or invalid Authorization header"
    - verifier rejected the token              → "Invalid or expired token"
"""

import logging
from typing import Optional

from fastapi import Request

from notes_service.auth.tokens import Claims, TokenVerifier
from notes_service.exceptions import AuthenticationError
from notes_service.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an Authorization header value, or None."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):]
    return token or None


def authenticate_request(request: Request) -> Claims:
    """
    Check the request's bearer token against the app's TokenVerifier.

    Raises:
        AuthenticationError: header missing or not Bearer, or token rejected.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if token is None:
        logger.info("[%s] Rejected request without bearer token", request_id_var.get(""))
        raise AuthenticationError(AuthenticationError.MISSING_HEADER)

    verifier: TokenVerifier = request.app.state.token_verifier
    claims = verifier.verify(token)
    if claims is None:
        logger.info("[%s] Rejected invalid or expired bearer token", request_id_var.get(""))
        raise AuthenticationError(AuthenticationError.INVALID_TOKEN)

    request.state.claims = claims
    return claims


async def require_claims(request: Request) -> Claims:
    """
    Resolve the caller's claims or fail the request with 401.

    Usage:
        router = APIRouter(dependencies=[Depends(require_claims)])

    FastAPI parses a JSON body before it resolves dependencies, so the
    RequestValidationError handler also calls authenticate_request for /api
    paths; a malformed body never answers before the token is checked.
    """
    return authenticate_request(request)
