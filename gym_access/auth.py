"""Session tokens and role checks.

Sessions are HS256 JWTs carrying the user id and role. Browsers hold them in the
``session`` cookie (EventSource cannot set headers); other clients may send them
as a bearer token.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

import bcrypt
import jwt
from fastapi import Cookie, Depends, Header, HTTPException
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy import select
from pydantic import BaseModel
from .db import SessionLocal
from .models import User
from .settings import settings

log = logging.getLogger("auth")

SESSION_COOKIE = "session"

class Identity(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False

def issue_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(seconds=settings.SESSION_MAX_AGE),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

def decode_token(token: str) -> Identity:
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.PyJWTError as e:
        log.info("Rejected session token: %s", e)
        raise HTTPException(401, "Not authenticated")
    if not claims.get("sub") or not claims.get("role"):
        raise HTTPException(401, "Not authenticated")
    return Identity(id=claims["sub"], email=claims.get("email") or "", name=claims.get("name"), role=claims["role"])

def authenticate_user(email: str, password: str) -> User:
    with SessionLocal() as s:
        user = s.scalars(select(User).where(User.email == email)).first()
    if user is None or not user.hashed_password or not verify_password(password, user.hashed_password):
        log.info("Failed login for %s", email)
        raise HTTPException(401, "Invalid credentials")
    return user

def current_user(
    authorization: Optional[str] = Header(default=None),
    session: Optional[str] = Cookie(default=None),
) -> Identity:
    scheme, token = get_authorization_scheme_param(authorization)
    if not (scheme.lower() == "bearer" and token):
        token = session
    if not token:
        raise HTTPException(401, "Not authenticated")
    return decode_token(token)

def require_roles(roles: Iterable[str]):
    allowed = set(roles)

    def dependency(user: Identity = Depends(current_user)) -> Identity:
        if user.role not in allowed:
            log.info("User %s with role %s denied", user.id, user.role)
            raise HTTPException(403, "Forbidden")
        return user

    return dependency

def require_api_key(authorization: Optional[str] = Header(default=None)) -> None:
    scheme, key = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or key != settings.RFID_API_KEY:
        raise HTTPException(401, "Unauthorized")
