from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
import logging

from ..auth import require_admin
from ..database import get_db
from ..models.database import User
from ..models.schemas import SiteSettingsResponse, SiteSettingsUpdate
from ..services import storage
from ..services.audit_logger import AuditAction, record_audit_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["Site Settings"])

@router.get("", response_model=SiteSettingsResponse)
async def get_site_settings(db: Session = Depends(get_db)):
    """Public branding settings; defaults when never saved."""
    site_settings = storage.get_site_settings(db)
    if site_settings is None:
        return storage.default_site_settings()
    return site_settings

@router.put("", response_model=SiteSettingsResponse)
async def update_site_settings(
    payload: SiteSettingsUpdate,
    request: Request,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Update branding settings (admin only)."""
    changes = payload.model_dump(exclude_unset=True)
    site_settings = storage.update_site_settings(db, changes)

    logger.info(f"Site settings updated by admin {admin.email}: {sorted(changes)}")
    record_audit_event(
        db, admin.id, admin.email, AuditAction.SETTINGS_UPDATE, request,
        details={"fields": sorted(changes)}
    )
    return site_settings
