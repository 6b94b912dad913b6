import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.config import config
from app.database import transactional
from app.errors.delay_errors import DelayJustificationNotFound, DelayNotificationNotFound, EmptyJustification
from app.models import (
    Client,
    ClientStatus,
    ComercialStatus,
    DelayJustification,
    DelayNotification,
    DelayNotificationType,
    User,
)
from app.schemas.delay import DelayScanResult
from app.utils.clock import Clock

logger = logging.getLogger(__name__)


ONBOARDING_COMERCIAL_STATUSES = (ComercialStatus.CONSULTORIA_MARCADA, ComercialStatus.CONSULTORIA_REALIZADA)
INACTIVE_CLIENT_STATUSES = (ClientStatus.CHURNED, ClientStatus.ARCHIVED)


class DelayDetectionService:
    """
    Raises SLA-breach notifications for the sales pipeline.

    Two disjoint sets are scanned: ``novo`` clients older than
    ``new_client_hours`` since entering the pipeline, and clients with a
    scheduled/performed consultation older than ``onboarding_days`` since
    their comercial onboarding started. Elapsed time is floored to whole
    units. One notification per (user, type, client) until it is justified.
    """

    def __init__(
        self,
        db: Session,
        clock: Optional[Clock] = None,
        new_client_hours: Optional[int] = None,
        onboarding_days: Optional[int] = None,
    ):
        self.db = db
        self.clock = clock or Clock()
        self.new_client_hours = new_client_hours if new_client_hours is not None else config.NEW_CLIENT_DELAY_HOURS
        self.onboarding_days = onboarding_days if onboarding_days is not None else config.ONBOARDING_DELAY_DAYS

    def scan(self, now: Optional[datetime] = None) -> DelayScanResult:
        now = now or self.clock.now()
        result = DelayScanResult()
        logger.info("Starting comercial delay scan...")

        with transactional(self.db):
            for client in self._clients_with_status(ComercialStatus.NOVO):
                hours = self.clock.hours_since(client.comercial_entered_at, now)
                if hours >= self.new_client_hours:
                    if self._notify(client, DelayNotificationType.NOVO_CLIENTE_24H, result):
                        result.new_client_notifications += 1

            for client in self._clients_with_status(*ONBOARDING_COMERCIAL_STATUSES):
                days = self.clock.days_since(client.comercial_onboarding_started_at, now)
                if days >= self.onboarding_days:
                    if self._notify(client, DelayNotificationType.ONBOARDING_5D, result):
                        result.onboarding_notifications += 1

        logger.info(
            f"Delay scan done: {result.new_client_notifications} new-client, "
            f"{result.onboarding_notifications} onboarding notification(s); "
            f"{result.already_notified} already open, {result.skipped_unassigned} unassigned"
        )
        return result

    def _clients_with_status(self, *statuses: ComercialStatus) -> list[Client]:
        return (
            self.db.query(Client)
            .filter(
                Client.comercial_status.in_(statuses),
                Client.status.notin_(INACTIVE_CLIENT_STATUSES),
            )
            .order_by(Client.id)
            .all()
        )

    def _notify(self, client: Client, notification_type: DelayNotificationType, result: DelayScanResult) -> bool:
        user_id = client.assigned_comercial_id
        if user_id is None:
            logger.warning(f"Client {client.id} is delayed ({notification_type.value}) but has no comercial consultant")
            result.skipped_unassigned += 1
            return False

        existing = (
            self.db.query(DelayNotification)
            .filter(
                DelayNotification.user_id == user_id,
                DelayNotification.notification_type == notification_type,
                DelayNotification.client_id == client.id,
            )
            .first()
        )
        if existing:
            result.already_notified += 1
            return False

        user = self.db.get(User, user_id)
        self.db.add(
            DelayNotification(
                user_id=user_id,
                user_name=user.name if user else None,
                notification_type=notification_type,
                client_id=client.id,
                client_name=client.name,
            )
        )
        self.db.flush()
        logger.info(f"Delay notification {notification_type.value} raised for client {client.id} -> user {user_id}")
        return True

    def pending_notifications(self, user_id: int) -> list[DelayNotification]:
        return (
            self.db.query(DelayNotification)
            .filter(DelayNotification.user_id == user_id)
            .order_by(DelayNotification.created_at.asc(), DelayNotification.id.asc())
            .all()
        )

    def justify(
        self, notification_id: int, *, user_id: int, justification: str, user_name: Optional[str] = None
    ) -> DelayJustification:
        """Files the justification and resolves (deletes) the notification."""
        if not justification or not justification.strip():
            raise EmptyJustification("Justification must not be empty")

        with transactional(self.db):
            notification = self.db.get(DelayNotification, notification_id)
            # only the notified user may resolve their own notification
            if notification is None or notification.user_id != user_id:
                raise DelayNotificationNotFound(f"Delay notification {notification_id} not found")

            record = DelayJustification(
                notification_id=notification.id,
                user_id=user_id,
                user_name=user_name,
                justification=justification.strip(),
                notification_type=notification.notification_type,
                client_name=notification.client_name,
            )
            self.db.add(record)
            self.db.delete(notification)
            self.db.flush()
        logger.info(f"Delay notification {notification_id} justified by user {user_id}")
        return record

    def list_justifications(self, *, include_archived: bool = False, user_id: Optional[int] = None) -> list[DelayJustification]:
        q = self.db.query(DelayJustification)
        if not include_archived:
            q = q.filter(DelayJustification.archived.is_(False))
        if user_id is not None:
            q = q.filter(DelayJustification.user_id == user_id)
        return q.order_by(DelayJustification.created_at.desc(), DelayJustification.id.desc()).all()

    def archive_justification(self, justification_id: int, *, archived_by_id: int) -> DelayJustification:
        with transactional(self.db):
            record = self.db.get(DelayJustification, justification_id)
            if record is None:
                raise DelayJustificationNotFound(f"Delay justification {justification_id} not found")
            if not record.archived:
                record.archived = True
                record.archived_at = self.clock.now()
                record.archived_by_id = archived_by_id
        return record
