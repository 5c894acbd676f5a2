"""Route Dependencies — cookie-based access-token authentication.

Invariants:
    - Token is read from the access-token cookie, never from the Authorization header
    - Missing cookie → 401 "Unauthorized"; bad or expired token → 401 "Invalid or expired token"
    - Verified claims stored on request.state.user
"""

from fastapi import Depends, Request

from app.config import Settings, get_settings
from app.core.errors import AuthenticationError, ErrorContext
from app.core.security import decode_access_token


async def get_current_user(
    request: Request, settings: Settings = Depends(get_settings),
) -> dict:
    """Verify the access-token cookie and return its claims."""
    token = request.cookies.get(settings.access_token_cookie_name)
    if not token:
        raise AuthenticationError(
            "Unauthorized", ErrorContext(path=request.url.path),
        )
    claims = decode_access_token(token, settings.access_token_secret)
    request.state.user = claims
    return claims
