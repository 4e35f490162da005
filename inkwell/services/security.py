"""
Security Service

Handles password hashing, JWT creation/validation and the split-token
cookie scheme.

Security Features:
==================
1. Password hashing with bcrypt (passlib)
2. HS256 JWTs (python-jose) carrying the author id in `sub`
3. Split tokens: the signature segment can live in an httpOnly cookie

Split Tokens
============
After authenticating, the client receives the full token and two cookies:

    jwt.header.payload  "<header>.<payload>"   readable by JavaScript
    jwt.signature       "<signature>"          httpOnly, SameSite=Strict

Client-side code can read the claims (author name, expiry) from the first
cookie and send `Authorization: Bearer <header>.<payload>`; the browser
attaches the signature cookie, and the server joins the two before
verifying. A script that steals the readable half cannot forge requests.
"""

import logging
from datetime import UTC, datetime, timedelta

from fastapi import Response
from jose import JWTError, jwt
from passlib.context import CryptContext

from inkwell.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("secret123")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a bcrypt hash (constant time)."""
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------
ALGORITHM = "HS256"

HEADER_PAYLOAD_COOKIE = "jwt.header.payload"
SIGNATURE_COOKIE = "jwt.signature"


class MalformedTokenError(Exception):
    """Raised when a bearer credential cannot be assembled into a JWT."""

    pass


def create_access_token(
    author_id: str,
    claims: dict | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token for an author.

    Args:
        author_id: Stored in the `sub` claim
        claims: Extra public claims (e.g. the author's name and username)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string (header.payload.signature)
    """
    to_encode = dict(claims or {})

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    expire = datetime.now(UTC) + expires_delta

    to_encode.update({"sub": author_id, "exp": expire, "type": "access"})

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=ALGORITHM,
    )


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[ALGORITHM],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        return None


def verify_token_type(token: str, expected_type: str) -> dict | None:
    """
    Decode a token and verify its type.

    Returns:
        Decoded payload if valid and correct type, None otherwise
    """
    payload = decode_token(token)

    if payload is None:
        return None

    if payload.get("type") != expected_type:
        logger.warning(f"Token type mismatch: expected {expected_type}")
        return None

    return payload


# -------------------------------------------------------------------------
# Split Token Handling
# -------------------------------------------------------------------------
def split_token(token: str) -> tuple[str, str]:
    """
    Split a JWT into its readable "header.payload" part and its signature.

    Raises:
        MalformedTokenError: If the token does not have three segments
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise MalformedTokenError("Malformed JWT.")
    return f"{parts[0]}.{parts[1]}", parts[2]


def assemble_token(bearer: str, signature: str | None) -> str:
    """
    Rebuild the full JWT from a bearer credential.

    A three-segment bearer is already a full token. A two-segment bearer
    is the "header.payload" half and is joined with the signature cookie.

    Raises:
        MalformedTokenError: Wrong segment count, or the signature cookie
            is missing for a two-segment bearer
    """
    parts = bearer.split(".")

    if len(parts) == 3:
        return bearer

    if len(parts) == 2:
        if not signature:
            raise MalformedTokenError("Malformed JWT.")
        return f"{bearer}.{signature}"

    raise MalformedTokenError("Malformed JWT.")


def parse_authorization_header(header: str) -> str:
    """
    Extract the credential from an `Authorization: Bearer <credential>` header.

    Raises:
        MalformedTokenError: If the header is not exactly "Bearer <credential>"
    """
    parts = header.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer" or not parts[1]:
        raise MalformedTokenError("Malformed authorization header.")
    return parts[1]


def set_token_cookies(response: Response, token: str) -> None:
    """Store the split token on the response as two cookies."""
    header_payload, signature = split_token(token)
    max_age = settings.access_token_expire_minutes * 60

    response.set_cookie(
        HEADER_PAYLOAD_COOKIE,
        header_payload,
        max_age=max_age,
        httponly=False,
        secure=settings.cookie_secure,
        samesite="strict",
    )
    response.set_cookie(
        SIGNATURE_COOKIE,
        signature,
        max_age=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


def clear_token_cookies(response: Response) -> None:
    response.delete_cookie(HEADER_PAYLOAD_COOKIE)
    response.delete_cookie(SIGNATURE_COOKIE)
