"""
Persistence for translations, memorandums, site settings and the audit log.

Lookups by id are not scoped to a user here; callers that need ownership
checks compare ``user_id`` themselves.
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from ..models.database import (
    AuditLog, Memorandum, MemorandumVersion, SiteSettings, Translation, TranslationVersion, utcnow
)

logger = logging.getLogger(__name__)

SITE_SETTINGS_ID = "default"
DEFAULT_APP_TITLE = "AI Legal System"
MAX_AUDIT_LOG_LIMIT = 500

# ---------------------------------------------------------------------------
# Translations
# ---------------------------------------------------------------------------

def list_translations(db: Session, user_id: str, limit: Optional[int] = None) -> List[Translation]:
    """Translations owned by user_id, newest first."""
    query = (
        db.query(Translation)
        .options(selectinload(Translation.versions))
        .filter(Translation.user_id == user_id)
        .order_by(Translation.created_at.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()

def get_translation(db: Session, translation_id: str) -> Optional[Translation]:
    """Look up a translation by id, with its versions."""
    return (
        db.query(Translation)
        .options(selectinload(Translation.versions))
        .filter(Translation.id == translation_id)
        .first()
    )

def create_translation(
    db: Session,
    user_id: str,
    source_language: str,
    target_language: str,
    source_text: str,
    translated_text: str,
    document_type: str,
    purpose: str,
    tone: str,
    jurisdiction: str
) -> Translation:
    try:
        translation = Translation(
            user_id=user_id,
            source_language=source_language,
            target_language=target_language,
            source_text=source_text,
            translated_text=translated_text,
            document_type=document_type,
            purpose=purpose,
            tone=tone,
            jurisdiction=jurisdiction
        )
        db.add(translation)
        db.commit()
        db.refresh(translation)

        logger.info(f"Stored translation {translation.id} for user {user_id}")
        return translation

    except Exception as e:
        logger.error(f"Error storing translation for user {user_id}: {str(e)}")
        db.rollback()
        raise

def delete_translation(db: Session, translation_id: str) -> None:
    """Delete a translation and its version rows."""
    try:
        db.query(TranslationVersion).filter(
            TranslationVersion.translation_id == translation_id
        ).delete(synchronize_session=False)
        db.query(Translation).filter(Translation.id == translation_id).delete(synchronize_session=False)
        db.commit()

        logger.info(f"Deleted translation {translation_id}")

    except Exception as e:
        logger.error(f"Error deleting translation {translation_id}: {str(e)}")
        db.rollback()
        raise

def add_translation_version(db: Session, translation_id: str, translated_text: str) -> Optional[Translation]:
    """Append a version and make it the current translated text."""
    translation = get_translation(db, translation_id)
    if translation is None:
        return None

    try:
        last_position = db.query(func.max(TranslationVersion.position)).filter(
            TranslationVersion.translation_id == translation_id
        ).scalar() or 0

        db.add(TranslationVersion(
            translation_id=translation_id,
            position=last_position + 1,
            translated_text=translated_text
        ))
        translation.translated_text = translated_text
        db.commit()
        db.refresh(translation)
        db.expire(translation, ["versions"])

        return translation

    except Exception as e:
        logger.error(f"Error adding version to translation {translation_id}: {str(e)}")
        db.rollback()
        raise

# ---------------------------------------------------------------------------
# Memorandums
# ---------------------------------------------------------------------------

def list_memorandums(db: Session, user_id: str, limit: Optional[int] = None) -> List[Memorandum]:
    """Memorandums owned by user_id, newest first."""
    query = (
        db.query(Memorandum)
        .options(selectinload(Memorandum.versions))
        .filter(Memorandum.user_id == user_id)
        .order_by(Memorandum.created_at.desc())
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()

def get_memorandum(db: Session, memorandum_id: str) -> Optional[Memorandum]:
    """Look up a memorandum by id, with its versions."""
    return (
        db.query(Memorandum)
        .options(selectinload(Memorandum.versions))
        .filter(Memorandum.id == memorandum_id)
        .first()
    )

def create_memorandum(
    db: Session,
    user_id: str,
    type: str,
    language: str,
    court_name: str,
    case_number: str,
    case_facts: str,
    legal_requests: str,
    strength: str,
    generated_content: str,
    defense_points: Optional[str] = None
) -> Memorandum:
    try:
        memorandum = Memorandum(
            user_id=user_id,
            type=type,
            language=language,
            court_name=court_name,
            case_number=case_number,
            case_facts=case_facts,
            legal_requests=legal_requests,
            defense_points=defense_points,
            strength=strength,
            generated_content=generated_content
        )
        db.add(memorandum)
        db.commit()
        db.refresh(memorandum)

        logger.info(f"Stored memorandum {memorandum.id} for user {user_id}")
        return memorandum

    except Exception as e:
        logger.error(f"Error storing memorandum for user {user_id}: {str(e)}")
        db.rollback()
        raise

def delete_memorandum(db: Session, memorandum_id: str) -> None:
    """Delete a memorandum and its version rows."""
    try:
        db.query(MemorandumVersion).filter(
            MemorandumVersion.memorandum_id == memorandum_id
        ).delete(synchronize_session=False)
        db.query(Memorandum).filter(Memorandum.id == memorandum_id).delete(synchronize_session=False)
        db.commit()

        logger.info(f"Deleted memorandum {memorandum_id}")

    except Exception as e:
        logger.error(f"Error deleting memorandum {memorandum_id}: {str(e)}")
        db.rollback()
        raise

def add_memorandum_version(db: Session, memorandum_id: str, content: str) -> Optional[Memorandum]:
    """Append a version and make it the current generated content."""
    memorandum = get_memorandum(db, memorandum_id)
    if memorandum is None:
        return None

    try:
        last_position = db.query(func.max(MemorandumVersion.position)).filter(
            MemorandumVersion.memorandum_id == memorandum_id
        ).scalar() or 0

        db.add(MemorandumVersion(
            memorandum_id=memorandum_id,
            position=last_position + 1,
            content=content
        ))
        memorandum.generated_content = content
        db.commit()
        db.refresh(memorandum)
        db.expire(memorandum, ["versions"])

        return memorandum

    except Exception as e:
        logger.error(f"Error adding version to memorandum {memorandum_id}: {str(e)}")
        db.rollback()
        raise

# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def get_user_stats(db: Session, user_id: str, recent: int = 5) -> Dict[str, Any]:
    return {
        "total_translations": db.query(func.count(Translation.id)).filter(Translation.user_id == user_id).scalar(),
        "total_memorandums": db.query(func.count(Memorandum.id)).filter(Memorandum.user_id == user_id).scalar(),
        "recent_translations": list_translations(db, user_id, limit=recent),
        "recent_memorandums": list_memorandums(db, user_id, limit=recent),
    }

# ---------------------------------------------------------------------------
# Site settings
# ---------------------------------------------------------------------------

def get_site_settings(db: Session) -> Optional[SiteSettings]:
    """The saved settings row, or None if never saved."""
    return db.query(SiteSettings).filter(SiteSettings.id == SITE_SETTINGS_ID).first()

def default_site_settings() -> Dict[str, Any]:
    """Settings served before an admin saves any."""
    return {
        "id": SITE_SETTINGS_ID,
        "logo_url": None,
        "app_title": DEFAULT_APP_TITLE,
        "app_subtitle": None,
        "footer_text": None,
        "updated_at": None,
    }

def update_site_settings(db: Session, changes: Dict[str, Any]) -> SiteSettings:
    """Apply a partial update, creating the singleton row on first use."""
    try:
        site_settings = get_site_settings(db)
        if site_settings is None:
            site_settings = SiteSettings(id=SITE_SETTINGS_ID, app_title=DEFAULT_APP_TITLE)
            db.add(site_settings)

        for field, value in changes.items():
            setattr(site_settings, field, value)
        site_settings.updated_at = utcnow()

        db.commit()
        db.refresh(site_settings)
        return site_settings

    except Exception as e:
        logger.error(f"Error updating site settings: {str(e)}")
        db.rollback()
        raise

# ---------------------------------------------------------------------------
# Audit log
# ---------------------------------------------------------------------------

def clamp_audit_limit(limit: int) -> int:
    return max(1, min(limit, MAX_AUDIT_LOG_LIMIT))

def list_audit_logs(db: Session, limit: int = 100) -> List[AuditLog]:
    """Most recent audit entries, newest first, at most MAX_AUDIT_LOG_LIMIT."""
    return (
        db.query(AuditLog)
        .order_by(AuditLog.created_at.desc())
        .limit(clamp_audit_limit(limit))
        .all()
    )
