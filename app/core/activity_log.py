import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog
from app.models.user import User

logger = logging.getLogger(__name__)


def log_activity(
    db: Session,
    ip: Optional[str],
    action: str,
    details: Optional[str] = None,
    user: Optional[User] = None,
    city: Optional[str] = None,
    browser: Optional[str] = None,
) -> bool:
    """
    Append one activity row. Never raises: a failed log write must not fail
    the request that triggered it. Returns whether the row was written.
    """
    try:
        db.add(
            ActivityLog(
                ip_address=ip,
                user_id=user.id if user else None,
                user_name=user.name if user else None,
                action=action,
                details=details,
                city=city,
                browser=browser,
            )
        )
        db.commit()
        return True
    except Exception as e:
        logger.error("Failed to write to activity log: %s", e)
        try:
            db.rollback()
        except Exception:
            logger.exception("Rollback after failed activity log write also failed")
        return False


def get_logs(db: Session) -> list[ActivityLog]:
    return (
        db.query(ActivityLog)
        .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
        .all()
    )


def get_visitor_count(db: Session) -> int:
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.action == "VISIT", ActivityLog.ip_address.isnot(None))
        .count()
    )
