from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint

from app.database import Base


class DelayNotificationType(PyEnum):
    NOVO_CLIENTE_24H = "novo_cliente_24h"
    ONBOARDING_5D = "onboarding_5d"
    ACOMPANHAMENTO = "acompanhamento"


class DelayNotification(Base):
    """Open SLA breach. Deleted once a justification is filed."""

    __tablename__ = "delay_notifications"
    __table_args__ = (
        UniqueConstraint("user_id", "notification_type", "client_id", name="uq_delay_notifications_user_type_client"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user_name = Column(String, nullable=True)
    notification_type = Column(
        Enum(DelayNotificationType, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=True)
    client_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class DelayJustification(Base):
    __tablename__ = "delay_justifications"

    id = Column(Integer, primary_key=True, index=True)
    # The notification row is gone by the time anyone reads this; no FK
    notification_id = Column(Integer, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    user_name = Column(String, nullable=True)
    justification = Column(Text, nullable=False)
    notification_type = Column(
        Enum(DelayNotificationType, values_callable=lambda e: [m.value for m in e]), nullable=False
    )
    client_name = Column(String, nullable=True)
    archived = Column(Boolean, nullable=False, default=False)
    archived_at = Column(DateTime(timezone=True), nullable=True)
    archived_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
