from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session
from typing import List
import logging

from ..auth import SessionContext, get_current_user, require_authenticated
from ..config import settings
from ..database import get_db
from ..exceptions import NotFoundError, ServiceUnavailableError
from ..models.database import Memorandum, User
from ..models.schemas import MemorandumGenerateRequest, MemorandumResponse, MemorandumVersionCreate
from ..prompts import build_memorandum_prompt, build_memorandum_user_prompt
from ..services import storage
from ..services.audit_logger import AuditAction, record_audit_event
from ..services.claude_client import ClaudeClient, NOT_CONFIGURED_MESSAGE, get_claude_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/memorandums", tags=["Memorandums"])

DRAFTING_UNAVAILABLE_MESSAGE = "AI drafting service is temporarily unavailable. Please try again later."

def _get_owned_memorandum(db: Session, memorandum_id: str, user_id: str) -> Memorandum:
    memorandum = storage.get_memorandum(db, memorandum_id)
    if memorandum is None or memorandum.user_id != user_id:
        raise NotFoundError("Memorandum not found")
    return memorandum

@router.get("", response_model=List[MemorandumResponse])
async def list_memorandums(
    session: SessionContext = Depends(require_authenticated),
    db: Session = Depends(get_db)
):
    """List the current user's memorandums, newest first."""
    return storage.list_memorandums(db, session.user_id)

@router.post("/generate", response_model=MemorandumResponse)
async def generate_memorandum(
    payload: MemorandumGenerateRequest,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    claude: ClaudeClient = Depends(get_claude_client)
):
    """Draft a memorandum with the LLM and store it."""
    if not claude.is_configured:
        raise ServiceUnavailableError(NOT_CONFIGURED_MESSAGE)

    defense_points = payload.defense_points if payload.defense_points and payload.defense_points.strip() else None

    system_prompt = build_memorandum_prompt(payload.type, payload.language, payload.strength)
    user_prompt = build_memorandum_user_prompt(
        payload.language,
        payload.court_name,
        payload.case_number,
        payload.case_facts,
        payload.legal_requests,
        defense_points
    )

    try:
        generated_content = await claude.complete(
            system_prompt,
            user_prompt,
            deterministic=payload.deterministic,
            max_output_tokens=settings.memorandum_max_tokens
        )
    except ServiceUnavailableError as e:
        logger.error(f"Memorandum generation failed for user {current_user.id}: {e.message}")
        raise ServiceUnavailableError(DRAFTING_UNAVAILABLE_MESSAGE) from e

    memorandum = storage.create_memorandum(
        db,
        user_id=current_user.id,
        type=payload.type,
        language=payload.language,
        court_name=payload.court_name,
        case_number=payload.case_number,
        case_facts=payload.case_facts,
        legal_requests=payload.legal_requests,
        defense_points=defense_points,
        strength=payload.strength,
        generated_content=generated_content
    )

    record_audit_event(
        db, current_user.id, current_user.email, AuditAction.MEMORANDUM_GENERATE, request,
        details={"memorandumId": memorandum.id, "type": payload.type, "language": payload.language}
    )
    return memorandum

@router.get("/{memorandum_id}", response_model=MemorandumResponse)
async def get_memorandum(
    memorandum_id: str,
    session: SessionContext = Depends(require_authenticated),
    db: Session = Depends(get_db)
):
    return _get_owned_memorandum(db, memorandum_id, session.user_id)

@router.post("/{memorandum_id}/versions", response_model=MemorandumResponse)
async def add_memorandum_version(
    memorandum_id: str,
    payload: MemorandumVersionCreate,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Save edited content as the new current version."""
    _get_owned_memorandum(db, memorandum_id, current_user.id)

    memorandum = storage.add_memorandum_version(db, memorandum_id, payload.content)
    if memorandum is None:
        raise NotFoundError("Memorandum not found")

    record_audit_event(
        db, current_user.id, current_user.email, AuditAction.MEMORANDUM_VERSION_ADD, request,
        details={"memorandumId": memorandum_id}
    )
    return memorandum

@router.delete("/{memorandum_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_memorandum(
    memorandum_id: str,
    request: Request,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a memorandum. Unknown or foreign ids are a no-op."""
    memorandum = storage.get_memorandum(db, memorandum_id)
    if memorandum is not None and memorandum.user_id == current_user.id:
        storage.delete_memorandum(db, memorandum_id)
        record_audit_event(
            db, current_user.id, current_user.email, AuditAction.MEMORANDUM_DELETE, request,
            details={"memorandumId": memorandum_id}
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
