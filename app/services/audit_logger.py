"""
Append-only audit trail for security-relevant and data-mutating actions.

Writes are best-effort: a failing audit insert is logged and swallowed so it
never blocks the action being audited.
"""

from typing import Any, Dict, Optional
import logging

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import AuditLogError
from ..models.database import AuditLog

logger = logging.getLogger(__name__)


class AuditAction:
    REGISTER = "register"
    LOGIN = "login"
    LOGOUT = "logout"
    TRANSLATE = "translate"
    TRANSLATION_DELETE = "translation_delete"
    TRANSLATION_VERSION_ADD = "translation_version_add"
    MEMORANDUM_GENERATE = "memorandum_generate"
    MEMORANDUM_DELETE = "memorandum_delete"
    MEMORANDUM_VERSION_ADD = "memorandum_version_add"
    SETTINGS_UPDATE = "settings_update"
    USER_ROLE_CHANGE = "user_role_change"


def get_client_ip(request: Request) -> Optional[str]:
    """First hop of X-Forwarded-For, else the socket peer address."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else None


def _write_entry(db: Session, entry: AuditLog) -> None:
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise AuditLogError(str(e)) from e


def record_audit_event(
    db: Session,
    user_id: Optional[str],
    user_email: Optional[str],
    action: str,
    request: Request,
    details: Optional[Dict[str, Any]] = None
) -> None:
    """Append an audit entry. Never raises."""
    entry = AuditLog(
        user_id=user_id,
        user_email=user_email,
        action=action,
        details=details,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent")
    )
    try:
        _write_entry(db, entry)
    except AuditLogError as e:
        logger.error(f"Failed to write audit entry '{action}' for user {user_id}: {e}", exc_info=True)
