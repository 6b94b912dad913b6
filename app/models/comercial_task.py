from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint

from app.database import Base


class ComercialAutoTaskType(PyEnum):
    MARCAR_CONSULTORIA = "marcar_consultoria"
    REALIZAR_CONSULTORIA = "realizar_consultoria"


class ComercialTaskStatus(PyEnum):
    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class ComercialTask(Base):
    __tablename__ = "comercial_tasks"
    __table_args__ = (
        # NULL auto_task_type (manual tasks) never collides
        UniqueConstraint("related_client_id", "auto_task_type", name="uq_comercial_tasks_client_auto_type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(ComercialTaskStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ComercialTaskStatus.TODO,
    )
    related_client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=True)
    is_auto_generated = Column(Boolean, nullable=False, default=False)
    auto_task_type = Column(
        Enum(ComercialAutoTaskType, values_callable=lambda e: [m.value for m in e]), nullable=True
    )
    due_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    completed_at = Column(DateTime(timezone=True), nullable=True)


class ComercialTracking(Base):
    __tablename__ = "comercial_tracking"
    __table_args__ = (
        UniqueConstraint("client_id", "comercial_user_id", name="uq_comercial_tracking_client_user"),
    )

    id = Column(Integer, primary_key=True, index=True)
    comercial_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    manager_name = Column(String, nullable=True)
    current_day = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
