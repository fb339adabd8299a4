from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session
from typing import List
import logging

from ..auth import SessionContext, get_current_user, require_authenticated
from ..config import settings
from ..database import get_db
from ..exceptions import NotFoundError, ServiceUnavailableError
from ..models.database import Translation, User
from ..models.schemas import TranslateRequest, TranslationResponse, TranslationVersionCreate
from ..prompts import build_translation_prompt
from ..services import storage
from ..services.audit_logger import AuditAction, record_audit_event
from ..services.claude_client import ClaudeClient, NOT_CONFIGURED_MESSAGE, get_claude_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Translations"])

TRANSLATION_UNAVAILABLE_MESSAGE = "AI translation service is temporarily unavailable. Please try again later."

def _get_owned_translation(db: Session, translation_id: str, user_id: str) -> Translation:
    translation = storage.get_translation(db, translation_id)
    if translation is None or translation.user_id != user_id:
        raise NotFoundError("Translation not found")
    return translation

@router.get("/translations", response_model=List[TranslationResponse])
async def list_translations(
    session: SessionContext = Depends(require_authenticated),
    db: Session = Depends(get_db)
):
    """List the current user's translations, newest first."""
    return storage.list_translations(db, session.user_id)

@router.get("/translations/{translation_id}", response_model=TranslationResponse)
async def get_translation(
    translation_id: str,
    session: SessionContext = Depends(require_authenticated),
    db: Session = Depends(get_db)
):
    return _get_owned_translation(db, translation_id, session.user_id)

@router.post("/translate", response_model=TranslationResponse)
async def translate(
    payload: TranslateRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    claude: ClaudeClient = Depends(get_claude_client)
):
    """Translate legal text with the LLM and store the result."""
    if not claude.is_configured:
        raise ServiceUnavailableError(NOT_CONFIGURED_MESSAGE)

    system_prompt = build_translation_prompt(
        payload.source_language,
        payload.target_language,
        payload.document_type,
        payload.purpose,
        payload.tone,
        payload.jurisdiction
    )

    try:
        translated_text = await claude.complete(
            system_prompt,
            payload.source_text,
            deterministic=payload.deterministic,
            max_output_tokens=settings.translation_max_tokens
        )
    except ServiceUnavailableError as e:
        logger.error(f"Translation failed for user {current_user.id}: {e.message}")
        raise ServiceUnavailableError(TRANSLATION_UNAVAILABLE_MESSAGE) from e

    translation = storage.create_translation(
        db,
        user_id=current_user.id,
        source_language=payload.source_language,
        target_language=payload.target_language,
        source_text=payload.source_text,
        translated_text=translated_text,
        document_type=payload.document_type,
        purpose=payload.purpose,
        tone=payload.tone,
        jurisdiction=payload.jurisdiction
    )

    record_audit_event(
        db, current_user.id, current_user.email, AuditAction.TRANSLATE, request,
        details={
            "translationId": translation.id,
            "sourceLanguage": payload.source_language,
            "targetLanguage": payload.target_language,
            "documentType": payload.document_type,
        }
    )
    return translation

@router.post("/translations/{translation_id}/versions", response_model=TranslationResponse)
async def add_translation_version(
    translation_id: str,
    payload: TranslationVersionCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Save an edited translation as the new current version."""
    _get_owned_translation(db, translation_id, current_user.id)

    translation = storage.add_translation_version(db, translation_id, payload.translated_text)
    if translation is None:
        raise NotFoundError("Translation not found")

    record_audit_event(
        db, current_user.id, current_user.email, AuditAction.TRANSLATION_VERSION_ADD, request,
        details={"translationId": translation_id}
    )
    return translation

@router.delete("/translations/{translation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_translation(
    translation_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a translation. Unknown or foreign ids are a no-op."""
    translation = storage.get_translation(db, translation_id)
    if translation is not None and translation.user_id == current_user.id:
        storage.delete_translation(db, translation_id)
        record_audit_event(
            db, current_user.id, current_user.email, AuditAction.TRANSLATION_DELETE, request,
            details={"translationId": translation_id}
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
