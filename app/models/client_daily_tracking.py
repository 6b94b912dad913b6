from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from app.database import Base


class ClientDailyTracking(Base):
    """Placement of an active client on the ads manager's weekday board."""

    __tablename__ = "client_daily_tracking"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, unique=True)
    # Copied from the client at creation; reassignment does not propagate here
    ads_manager_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    current_day = Column(String, nullable=False)
    last_moved_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    is_delayed = Column(Boolean, nullable=False, default=False)
