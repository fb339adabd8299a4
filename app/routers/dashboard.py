from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import SessionContext, require_authenticated
from ..database import get_db
from ..models.schemas import StatsResponse
from ..services import storage

router = APIRouter(prefix="/api", tags=["Dashboard"])

@router.get("/stats", response_model=StatsResponse)
async def get_stats(
    session: SessionContext = Depends(require_authenticated),
    db: Session = Depends(get_db)
):
    """Totals and the five most recent translations and memorandums."""
    return storage.get_user_stats(db, session.user_id)
