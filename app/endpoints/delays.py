import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth.permissions import JUSTIFICATION_ARCHIVERS, get_current_user
from app.dependencies import get_db
from app.errors.delay_errors import DelayJustificationNotFound, DelayNotificationNotFound, EmptyJustification
from app.schemas.delay import DelayJustificationResponse, DelayNotificationResponse, JustificationCreate
from app.services.delay_detection import DelayDetectionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/delays", tags=["Delays"])


@router.get("/notifications", response_model=List[DelayNotificationResponse])
def list_my_delay_notifications(
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user()),
):
    """Open (not yet justified) delay notifications addressed to the caller."""
    return DelayDetectionService(db).pending_notifications(current_user["id"])


@router.post("/notifications/{notification_id}/justify", response_model=DelayJustificationResponse, status_code=201)
def justify_delay(
    notification_id: int,
    data: JustificationCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user()),
):
    service = DelayDetectionService(db)
    try:
        return service.justify(
            notification_id,
            user_id=current_user["id"],
            user_name=current_user.get("name"),
            justification=data.justification,
        )
    except DelayNotificationNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EmptyJustification as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/justifications", response_model=List[DelayJustificationResponse])
def list_justifications(
    include_archived: bool = False,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user()),
):
    return DelayDetectionService(db).list_justifications(include_archived=include_archived)


@router.post("/justifications/{justification_id}/archive", response_model=DelayJustificationResponse)
def archive_justification(
    justification_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user(JUSTIFICATION_ARCHIVERS)),
):
    service = DelayDetectionService(db)
    try:
        return service.archive_justification(justification_id, archived_by_id=current_user["id"])
    except DelayJustificationNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
