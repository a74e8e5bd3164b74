"""
Authentication Service
Resolves the calling owner from a bearer token; accounts live elsewhere
"""
from datetime import datetime, timedelta
import logging

from jose import jwt, JWTError
from fastapi import HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..config import settings
from ..database import database
from ..models import User

logger = logging.getLogger(__name__)

# Security
security = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, email: str) -> str:
    """Create JWT access token"""
    expire = datetime.utcnow() + timedelta(days=settings.jwt_expiration_days)
    to_encode = {
        "sub": user_id,
        "email": email,
        "exp": expire
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


async def require_auth(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    """Require authenticated user"""
    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")

    if settings.storage_backend == "mongo" and not await database.check_connection():
        raise HTTPException(
            status_code=503,
            detail="Database unavailable. Please try again later."
        )

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")

    return User(id=user_id, email=payload.get("email"))
