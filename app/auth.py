from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from sqlalchemy.orm import Session
import bcrypt

from app.config import settings
from app.database import get_db
from app.models.user import Role, User


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login", auto_error=False)


# ============================================================
# PASSWORD HELPERS
# ============================================================

def hash_password(password: str) -> str:
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str) -> bool:
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.checkpw(password_bytes, hashed.encode())


# ============================================================
# LOGIN (password only, like the family's shared codes)
# ============================================================

def authenticate_by_password(db: Session, password: str) -> Optional[User]:
    users = db.query(User).filter(User.hashed_password.isnot(None)).all()
    for user in users:
        if verify_password(password, user.hashed_password):
            return user
    return None


# ============================================================
# TOKEN CREATION
# ============================================================

def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# ============================================================
# CURRENT USER
# ============================================================

def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Anonymous visitors are allowed to read; returns None for them."""
    if not token:
        return None

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id: str = payload.get("sub")

        if user_id is None:
            raise HTTPException(status_code=401, detail="Invalid token")

    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.query(User).filter(User.id == user_id).first()

    # Deleted contributor with a live token
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    return user


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Authentication required.")
    return user


def require_editor(user: User = Depends(get_current_user)) -> User:
    if user.role not in (Role.OWNER.value, Role.CONTRIBUTOR.value):
        raise HTTPException(status_code=403, detail="Forbidden: editing is not allowed for this account.")
    return user


def require_owner(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.OWNER.value:
        raise HTTPException(status_code=403, detail="Forbidden: Owner access required.")
    return user
