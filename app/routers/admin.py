from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session
from typing import List
import logging

from ..auth import get_users, require_admin, update_user_role
from ..database import get_db
from ..exceptions import NotFoundError
from ..models.database import User, UserRole
from ..models.schemas import AuditLogResponse, UserResponse, UserRoleUpdate
from ..services import storage
from ..services.audit_logger import AuditAction, record_audit_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Administration"])

@router.get("/users", response_model=List[UserResponse])
async def list_users(
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """List all users (admin only)."""
    return get_users(db)

@router.patch("/users/{user_id}/role", response_model=UserResponse)
async def change_user_role(
    user_id: str,
    payload: UserRoleUpdate,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Grant or revoke admin rights (admin only)."""
    role = UserRole(payload.role)
    user = update_user_role(db, user_id, role)
    if user is None:
        raise NotFoundError("User not found")

    logger.info(f"User {user_id} role set to {role.value} by admin {admin.email}")
    record_audit_event(
        db, admin.id, admin.email, AuditAction.USER_ROLE_CHANGE, request,
        details={"targetUserId": user_id, "targetEmail": user.email, "role": role.value}
    )
    return user

@router.get("/audit-logs", response_model=List[AuditLogResponse])
async def list_audit_logs(
    limit: int = Query(default=100),
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Most recent audit entries; limit is clamped to 1..500."""
    return storage.list_audit_logs(db, limit=limit)
