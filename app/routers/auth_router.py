from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.auth import (
    authenticate_by_password,
    create_access_token,
    get_current_user,
)
from app.core.activity_log import log_activity
from app.models.user import User
from app.schemas.user_schema import LoginRequest, TokenOut, UserOut
from app.utils.request_info import client_ip


router = APIRouter(prefix="/api", tags=["Authentication"])


# ------------------- LOGIN -------------------

@router.post("/login", response_model=TokenOut)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    if not payload.password:
        raise HTTPException(
            status_code=400,
            detail="Password is required",
        )

    user = authenticate_by_password(db, payload.password)

    if not user:
        log_activity(db, client_ip(request), "LOGIN_FAILURE", "Failed login attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    log_activity(db, client_ip(request), "LOGIN_SUCCESS", f"Logged in as {user.role}", user)

    token = create_access_token({"sub": user.id, "role": user.role})

    return {
        "access_token": token,
        "token_type": "bearer",
        "user": user,
    }


# -------------------- ME ---------------------

@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user
