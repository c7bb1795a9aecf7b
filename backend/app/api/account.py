from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_user_id
from app.db import get_db
from app.services.goals import wipe_user_data

router = APIRouter(prefix="/account", tags=["account"])


@router.delete("/data")
def wipe_data(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Full data wipe: the only way goals are ever deleted."""
    return {"deleted": wipe_user_data(db, user_id)}
