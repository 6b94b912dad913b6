import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth.permissions import get_current_user
from app.dependencies import get_db
from app.errors.kanban_errors import (
    CardMoveNotAllowed,
    CardNotFound,
    CompletionNotificationNotFound,
    InvalidCardStatus,
)
from app.schemas.kanban import CardMoveRequest, CompletionNotificationResponse, MoveCardResult
from app.services.kanban import KanbanService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/kanban", tags=["Kanban"])


@router.patch("/cards/{card_id}/move", response_model=MoveCardResult)
def move_card(
    card_id: int,
    data: CardMoveRequest,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user()),
):
    service = KanbanService(db)
    try:
        return service.move_card(
            card_id,
            status=data.status,
            position=data.position,
            column_id=data.column_id,
            actor_id=current_user["id"],
            actor_role=current_user.get("role"),
        )
    except CardNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CardMoveNotAllowed as e:
        raise HTTPException(status_code=403, detail=str(e))
    except InvalidCardStatus as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/notifications", response_model=List[CompletionNotificationResponse])
def list_completion_notifications(
    unread_only: bool = True,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user()),
):
    return KanbanService(db).notifications_for(current_user["id"], unread_only=unread_only)


@router.post("/notifications/{notification_id}/read", response_model=CompletionNotificationResponse)
def mark_completion_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user()),
):
    try:
        return KanbanService(db).mark_notification_read(notification_id, requester_id=current_user["id"])
    except CompletionNotificationNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
