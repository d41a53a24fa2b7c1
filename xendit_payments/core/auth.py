"""
JWT session tokens for shop customers.

WHY: The shop endpoint that creates a Xendit invoice acts on the caller's
active order. The caller is identified by a signed session token carrying
the customer id and the channel the session belongs to, so the endpoint
can only ever reach orders owned by that customer in that channel.
"""

from datetime import datetime, timedelta
from typing import Dict, Any, Optional
from jose import jwt, JWTError

from xendit_payments.core.config import settings
from xendit_payments.core.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
)


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Token includes:
    - Session data (customer_id, channel_token)
    - exp: Expiration time (default: 24 hours)
    - iat: Issued at time (for audit)
    - nbf: Not before time (prevents premature use)

    Args:
        data: Session data to encode in token
        expires_delta: Optional custom expiration time

    Returns:
        JWT token string

    Example:
        >>> token = create_access_token({"customer_id": 1, "channel_token": "tenant1"})
        >>> len(token) > 100
        True
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)

    to_encode.update(
        {
            "exp": expire,
            "iat": datetime.utcnow(),
            "nbf": datetime.utcnow(),
        }
    )

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload with session data

    Raises:
        TokenExpiredError: If token has expired
        TokenInvalidError: If token is malformed or signature invalid
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )

    except jwt.ExpiredSignatureError:
        raise TokenExpiredError(message="Token has expired")

    except JWTError as e:
        raise TokenInvalidError(
            message="Invalid token",
            error=str(e),
        )


def create_customer_token(customer_id: int, channel_token: str) -> str:
    """
    Create a session token for a shop customer.

    Args:
        customer_id: Customer the session belongs to
        channel_token: Channel (tenant) token of the shop

    Returns:
        JWT token string
    """
    return create_access_token(
        {"customer_id": customer_id, "channel_token": channel_token}
    )
