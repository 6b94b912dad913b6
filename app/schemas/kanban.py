from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.kanban_card import KanbanBoard


class CardMoveRequest(BaseModel):
    status: str = Field(..., description="Destination status id")
    column_id: Optional[str] = None
    position: int = Field(0, ge=0)


class MoveCardResult(BaseModel):
    card_id: int
    board: KanbanBoard
    source_status: str
    status: str
    position: int
    entered_terminal_status: bool = False
    notification_id: Optional[int] = None


class CompletionNotificationResponse(BaseModel):
    id: int
    card_id: int
    card_title: str
    board: KanbanBoard
    completed_by_id: Optional[int] = None
    requester_id: int
    read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
