"""Auth API: register, login, profile endpoints."""
from __future__ import annotations
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import BaseModel
from jose import JWTError, jwt

from precalc.container import get_user_repo
from precalc.core.config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from precalc.persistence.interfaces.user_repository import User, UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

_bearer = HTTPBearer(auto_error=False)

DEFAULT_ROLE = "student"


# ------------------------------------------------------------------
# Password hashing (direct bcrypt)
# ------------------------------------------------------------------
def hash_password(password: str) -> str:
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            hashed_password.encode("utf-8")
        )
    except ValueError:
        return False


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class RegisterRequest(BaseModel):
    username: str
    password: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None


class LoginRequest(BaseModel):
    username: str
    password: str


# ------------------------------------------------------------------
# JWT helpers
# ------------------------------------------------------------------
def _create_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": user.id,
        "username": user.username,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)


def _decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}")


# ------------------------------------------------------------------
# Dependency: get current user from Bearer token
# ------------------------------------------------------------------
def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer)) -> dict:
    if not credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return _decode_token(credentials.credentials)


def _serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "role": user.role,
    }


# ------------------------------------------------------------------
# Endpoints
# ------------------------------------------------------------------
@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, users: UserRepository = Depends(get_user_repo)):
    username = body.username.strip()
    if not username or not body.password:
        raise HTTPException(status_code=400, detail="Username and password are required.")

    user = User(
        id=str(uuid.uuid4()),
        username=username,
        password_hash=hash_password(body.password),
        role=DEFAULT_ROLE,
        first_name=(body.firstName or "").strip() or None,
        last_name=(body.lastName or "").strip() or None,
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    if not users.add(user):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Username '{username}' is already taken.")

    logger.info("Registered user %s", username)
    return {"message": "Registration successful!", "role": user.role, "user": _serialize_user(user)}


@router.post("/login")
def login(body: LoginRequest, users: UserRepository = Depends(get_user_repo)):
    user = users.get_by_username(body.username.strip())
    if not user or not verify_password(body.password, user.password_hash):
        logger.info("Failed login for %s", body.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return {
        "token": _create_token(user),
        "role": user.role,
        "user": _serialize_user(user),
    }


@router.get("/auth/profile")
def get_profile(
    current_user: dict = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repo),
):
    user = users.get_by_id(current_user["sub"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return _serialize_user(user)
