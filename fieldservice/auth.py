import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from jose import jwt as jose_jwt
from sqlalchemy.orm import Session, joinedload

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, SECRET_KEY
from .database import get_db
from .errors import AuthenticationError
from .models import Profile

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None, **claims) -> str:
    """
    Create a signed bearer token for a profile's auth_id

    Args:
        subject: Profile.auth_id the token authenticates
        expires_delta: Token lifetime (default ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode: dict[str, Any] = {**claims, "sub": subject, "exp": expire}
    return jose_jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_access_token(token: str) -> dict[str, Any]:
    """Decode a bearer token, raising AuthenticationError when it is not usable"""
    try:
        return jose_jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        logger.info("ℹ️ Token expired")
        raise AuthenticationError("Token has expired. Please refresh your session.") from e
    except JWTError as e:
        logger.warning(f"⚠️ JWT verification failed: {e}")
        raise AuthenticationError("Invalid token") from e


async def get_current_profile(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Profile:
    """Resolve the bearer token to the caller's profile"""
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Unauthorized")

    payload = verify_access_token(credentials.credentials)
    auth_id = payload.get("sub")
    if not auth_id:
        logger.error(f"❌ Token missing subject claim. Available claims: {list(payload.keys())}")
        raise AuthenticationError("Invalid token claims")

    profile = (
        db.query(Profile)
        .options(joinedload(Profile.customer), joinedload(Profile.team_member))
        .filter(Profile.auth_id == auth_id)
        .first()
    )
    if not profile:
        logger.warning(f"⚠️ No profile for token subject {auth_id}")
        raise AuthenticationError("Profile not found")

    logger.debug(f"✅ Profile authenticated: {profile.id} ({profile.role})")
    return profile
