"""
Password hashing and bearer tokens.

Login lives in the external user-management service. This module only has to
verify its tokens, and mint compatible ones for the seed script and tests.
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
from fastapi import HTTPException, status

from internhub.core.config import settings

# bcrypt ignores everything past 72 bytes
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str) -> str:
    """Hash with BCRYPT_ROUNDS (4 is fine for dev and tests, 12 for prod)"""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode('utf-8')


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Sign ``data`` as an access token (adds ``exp`` and ``type``)"""
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "exp": datetime.utcnow() + lifetime, "type": "access"}
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_user_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Token with the claim layout of the user-management service"""
    return create_access_token(
        {"sub": str(user.id), "email": user.email, "role": user.role.value},
        expires_delta,
    )


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; 401 on any failure"""
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
