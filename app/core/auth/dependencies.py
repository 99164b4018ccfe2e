from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List, Optional

from app.config.database import get_db
from app.shared.database.models import User
from app.core.auth.service import AuthService
from app.core.exceptions import AuthenticationError, AuthorizationError

security = HTTPBearer(auto_error=False)

async def get_current_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """Verified email of the caller, taken from the bearer token"""

    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    payload = AuthService.verify_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError()

    email = payload.get("email")
    if not email or not isinstance(email, str):
        raise AuthenticationError("Invalid token payload")

    return email.strip().lower()

def require_roles(allowed_roles: List[str]):
    """Factory for a dependency that requires one of the given stored roles"""
    def role_checker(
        email: str = Depends(get_current_email),
        db: Session = Depends(get_db)
    ) -> User:
        user = db.query(User).filter(User.email == email).first()
        if user is None or user.role not in allowed_roles:
            raise AuthorizationError()
        return user
    return role_checker

# Role specific dependencies
def get_admin_user(current_user: User = Depends(require_roles(["admin"]))) -> User:
    """Dependency for admins"""
    return current_user

def get_rider_user(current_user: User = Depends(require_roles(["rider"]))) -> User:
    """Dependency for riders"""
    return current_user

def ensure_same_email(current_email: str, requested_email: str):
    """Reject callers asking for someone else's data"""
    if current_email != (requested_email or "").strip().lower():
        raise AuthorizationError()
