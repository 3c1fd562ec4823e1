from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.auth import hash_password, require_owner
from app.core.activity_log import log_activity
from app.database import get_db
from app.models.user import Role, User
from app.schemas.user_schema import ContributorCreate, ContributorUpdate, UserOut
from app.utils.request_info import client_ip


router = APIRouter(prefix="/api/contributors", tags=["Contributors"])


def require_contributor(db: Session, contributor_id: str) -> User:
    user = (
        db.query(User)
        .filter(User.id == contributor_id, User.role == Role.CONTRIBUTOR.value)
        .first()
    )
    if not user:
        raise HTTPException(404, "Contributor not found or user is not a contributor.")
    return user


# --------------------------------------------------
# LIST (GET, plus the POST form older clients send)
# --------------------------------------------------
@router.get("", response_model=list[UserOut])
@router.post("/list", response_model=list[UserOut])
def list_contributors(
    db: Session = Depends(get_db),
    owner: User = Depends(require_owner),
):
    return (
        db.query(User)
        .filter(User.role == Role.CONTRIBUTOR.value)
        .order_by(User.created_at.asc())
        .all()
    )


# --------------------------------------------------
# CREATE
# --------------------------------------------------
@router.post("", response_model=UserOut, status_code=201)
def add_contributor(
    payload: ContributorCreate,
    request: Request,
    db: Session = Depends(get_db),
    owner: User = Depends(require_owner),
):
    name = payload.name.strip()
    if not name or not payload.password:
        raise HTTPException(400, "Name and password are required.")

    user = User(
        name=name,
        role=Role.CONTRIBUTOR.value,
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    log_activity(db, client_ip(request), "ADD_CONTRIBUTOR", f"Created contributor: {name}", owner)
    return user


# --------------------------------------------------
# UPDATE
# --------------------------------------------------
@router.put("/{contributor_id}", response_model=UserOut)
def update_contributor(
    contributor_id: str,
    payload: ContributorUpdate,
    request: Request,
    db: Session = Depends(get_db),
    owner: User = Depends(require_owner),
):
    name = payload.name.strip()
    if not name:
        raise HTTPException(400, "Name is required.")

    user = require_contributor(db, contributor_id)
    user.name = name

    # Password only changes when a new one is sent
    if payload.password:
        user.hashed_password = hash_password(payload.password)

    db.commit()
    db.refresh(user)

    log_activity(db, client_ip(request), "UPDATE_CONTRIBUTOR", f"Updated contributor: {name}", owner)
    return user


# --------------------------------------------------
# DELETE
# --------------------------------------------------
@router.delete("/{contributor_id}")
def delete_contributor(
    contributor_id: str,
    request: Request,
    db: Session = Depends(get_db),
    owner: User = Depends(require_owner),
):
    user = require_contributor(db, contributor_id)

    db.delete(user)
    db.commit()

    log_activity(db, client_ip(request), "DELETE_CONTRIBUTOR", f"Deleted contributor ID: {contributor_id}", owner)
    return {"message": "Contributor deleted successfully."}
