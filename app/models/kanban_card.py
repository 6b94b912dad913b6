from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class KanbanBoard(PyEnum):
    DESIGN = "design"
    DEVS = "devs"
    VIDEO = "video"
    ATRIZES = "atrizes"
    PRODUTORA = "produtora"


class KanbanCard(Base):
    __tablename__ = "kanban_cards"

    id = Column(Integer, primary_key=True, index=True)
    board = Column(Enum(KanbanBoard, values_callable=lambda e: [m.value for m in e]), nullable=False)
    column_id = Column(String, nullable=True)
    title = Column(String, nullable=False)
    status = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    # The requester; receives the completion notification
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)

    created_by = relationship("User")


class CardCompletionNotification(Base):
    __tablename__ = "card_completion_notifications"

    id = Column(Integer, primary_key=True, index=True)
    card_id = Column(Integer, ForeignKey("kanban_cards.id", ondelete="CASCADE"), nullable=False, index=True)
    card_title = Column(String, nullable=False)
    board = Column(Enum(KanbanBoard, values_callable=lambda e: [m.value for m in e]), nullable=False)
    completed_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
