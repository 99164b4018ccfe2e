# app/core/auth/service.py
from datetime import datetime, timedelta
from typing import Optional
from jose import jwt, JWTError
import logging

from app.config.settings import settings

logger = logging.getLogger(__name__)

class AuthService:
    """Token issuing and verification"""

    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create an access token carrying the caller's email"""
        to_encode = data.copy()

        if "email" not in to_encode:
            raise ValueError("email is required in the token")

        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(days=settings.access_token_expire_days)

        to_encode.update({"exp": expire})

        return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    @staticmethod
    def verify_token(token: str) -> Optional[dict]:
        """Verify and decode a token; None when the signature or expiry is bad"""
        try:
            return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            return None
