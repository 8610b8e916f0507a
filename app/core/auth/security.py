# app/core/auth/security.py

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from app.config import settings

from .schemas import TokenData

log = logging.getLogger(__name__)

# Tokens are issued by the authentication subsystem; tokenUrl is informational.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/v1/auth/token")

DEFAULT_TOKEN_LIFETIME = timedelta(days=7)


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """
    Create a signed access token whose ``sub`` is ``user_id``.

    Args:
        user_id (str): Owner id to embed.
        expires_delta (timedelta | None, optional): Token lifetime. Defaults to 7 days.

    Returns:
        str: Encoded JWT.
    """
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_LIFETIME)
    to_encode: dict[str, Any] = {"sub": str(user_id), "exp": expire}
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    log.debug("Created JWT token for sub: %s", user_id)
    return encoded_jwt


def verify_token(token: str, credentials_exception: HTTPException) -> TokenData:
    """
    Verify a JWT and return its data.

    Raises:
        HTTPException: ``credentials_exception`` if the token is invalid or expired.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        user_id: str | None = payload.get("sub")
        if user_id is None:
            log.warning("Token verification failed: 'sub' claim missing.")
            raise credentials_exception
        token_data = TokenData(user_id=user_id)
    except JWTError as e:
        log.warning("Token verification failed: JWTError - %s", e)
        raise credentials_exception from e
    except ValidationError as e:
        log.warning("Token verification failed: ValidationError - %s", e)
        raise credentials_exception from e

    log.debug("Token verified successfully for user_id: %s", user_id)
    return token_data


async def get_current_user_id(token: str = Depends(oauth2_scheme)) -> str:
    """
    FastAPI dependency returning the authenticated owner id.

    Raises:
        HTTPException: 401 if the token cannot be validated.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    token_data = verify_token(token, credentials_exception)
    return token_data.user_id  # type: ignore[return-value]
