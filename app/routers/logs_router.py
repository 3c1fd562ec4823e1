from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import require_owner
from app.core.activity_log import get_logs, get_visitor_count
from app.database import get_db
from app.models.user import User
from app.schemas.log_schema import ActivityLogOut, VisitorCountOut


router = APIRouter(prefix="/api", tags=["Activity"])


@router.get("/logs", response_model=list[ActivityLogOut])
def list_logs(
    db: Session = Depends(get_db),
    owner: User = Depends(require_owner),
):
    """Owner only. Newest first."""
    return get_logs(db)


@router.get("/visitors/count", response_model=VisitorCountOut)
def visitor_count(db: Session = Depends(get_db)):
    return {"count": get_visitor_count(db)}
