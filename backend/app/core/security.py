"""Security Helpers — password hashing and access-token encode/decode.

Invariants:
    - Passwords stored only as passlib hashes
    - Access tokens are HS256 JWTs; the user id travels in the "sub" claim
    - Any decode failure (bad signature, expired, malformed) raises AuthenticationError

Design Decisions:
    - pbkdf2_sha256 scheme: pure-Python passlib backend, no native bcrypt build on serverless
    - Functions take the secret explicitly: no settings lookup inside pure helpers
    - Issuing side (create_access_token, verify_password) is not routed: this service has no
      login endpoint. Kept for ops token minting and as the counterpart the tests sign with
"""

from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from app.core.errors import AuthenticationError

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login password against its stored hash. Not used by any route."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    subject: str,
    secret: str,
    expires_minutes: int = 60,
    extra_claims: dict | None = None,
) -> str:
    """Create a signed access token for subject, as the login service issues it."""
    claims = dict(extra_claims or {})
    claims["sub"] = subject
    claims["exp"] = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str) -> dict:
    """Verify token and return its claims."""
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid or expired token") from e
