"""Session token helpers.

Sessions are stateless JWT bearer tokens whose subject is the account ID.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from jose import JWTError, jwt

from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY

logger = logging.getLogger(__name__)


def create_access_token(account_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        account_id: ID of the authenticated account, stored as the subject.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "sub": account_id,
        "exp": datetime.now(pytz.utc) + expires_delta,
    }
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Decode a JWT access token.

    Args:
        token: Encoded token from the Authorization header.

    Returns:
        The account ID in the token, or None if the token is invalid or expired.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.debug("Rejected access token: %s", e)
        return None
    return payload.get("sub")
