import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.config import config
from app.database import transactional
from app.errors.comercial_errors import ComercialTaskNotFound
from app.errors.client_errors import ClientNotFound
from app.models import (
    Client,
    ComercialAutoTaskType,
    ComercialStatus,
    ComercialTask,
    ComercialTaskStatus,
    ComercialTracking,
)
from app.schemas.comercial import ComercialAdvancementResult
from app.schemas.onboarding import InitialTasksResult
from app.utils.clock import Clock

logger = logging.getLogger(__name__)


MARCAR_CONSULTORIA_DUE_HOURS = 24


class ComercialAutomationService:
    """
    Two-step sales pipeline: schedule the consultation, then perform it.

    Only ``Client.comercial_status`` is touched here; the onboarding
    ``Client.status`` belongs to the onboarding engine.
    """

    def __init__(self, db: Session, clock: Optional[Clock] = None):
        self.db = db
        self.clock = clock or Clock()

    def complete_comercial_task(
        self,
        task_id: int,
        *,
        acting_user_id: Optional[int] = None,
        manager_id: Optional[int] = None,
        manager_name: Optional[str] = None,
    ) -> ComercialAdvancementResult:
        with transactional(self.db):
            task = self.db.get(ComercialTask, task_id)
            if task is None:
                raise ComercialTaskNotFound(f"Comercial task {task_id} not found")

            result = ComercialAdvancementResult(
                task_id=task.id, task_type=task.auto_task_type, client_id=task.related_client_id
            )
            if task.status == ComercialTaskStatus.DONE:
                logger.info(f"Comercial task {task_id} already done; skipping automation")
                result.already_completed = True
                return result

            now = self.clock.now()
            task.status = ComercialTaskStatus.DONE
            task.completed_at = now

            if task.related_client_id is None or task.auto_task_type is None:
                return result

            client = self.db.get(Client, task.related_client_id)
            if client is None:
                raise ClientNotFound(f"Client {task.related_client_id} not found")

            if task.auto_task_type == ComercialAutoTaskType.MARCAR_CONSULTORIA:
                client.comercial_status = ComercialStatus.CONSULTORIA_MARCADA
                client.comercial_onboarding_started_at = now
                result.task_created = self._create_realizar_consultoria_task(client, acting_user_id)
                logger.info(f"Client {client.id} moved to consultoria_marcada")
            elif task.auto_task_type == ComercialAutoTaskType.REALIZAR_CONSULTORIA:
                client.comercial_status = ComercialStatus.EM_ACOMPANHAMENTO
                if manager_id is not None and acting_user_id is not None:
                    result.tracking_created = self._add_to_tracking(client, acting_user_id, manager_id, manager_name)
                logger.info(f"Client {client.id} moved to em_acompanhamento")

            result.comercial_status = client.comercial_status
            self.db.flush()
            return result

    def _create_auto_task(
        self,
        client: Client,
        task_type: ComercialAutoTaskType,
        *,
        title: str,
        description: str,
        user_id: Optional[int],
        due_date: Optional[datetime],
    ) -> bool:
        existing = (
            self.db.query(ComercialTask)
            .filter(ComercialTask.related_client_id == client.id, ComercialTask.auto_task_type == task_type)
            .first()
        )
        if existing:
            logger.debug(f"Comercial task {task_type.value} already exists for client {client.id}; skipping")
            return False

        self.db.add(
            ComercialTask(
                user_id=user_id,
                title=title,
                description=description,
                status=ComercialTaskStatus.TODO,
                related_client_id=client.id,
                is_auto_generated=True,
                auto_task_type=task_type,
                due_date=due_date,
            )
        )
        self.db.flush()
        return True

    def _create_realizar_consultoria_task(self, client: Client, acting_user_id: Optional[int]) -> bool:
        return self._create_auto_task(
            client,
            ComercialAutoTaskType.REALIZAR_CONSULTORIA,
            title=f"Realizar Consultoria - {client.name}",
            description=f"Executar consultoria comercial com o cliente {client.name}",
            user_id=client.assigned_comercial_id or acting_user_id,
            due_date=None,
        )

    def _add_to_tracking(
        self, client: Client, comercial_user_id: int, manager_id: int, manager_name: Optional[str]
    ) -> bool:
        existing = (
            self.db.query(ComercialTracking)
            .filter(
                ComercialTracking.client_id == client.id,
                ComercialTracking.comercial_user_id == comercial_user_id,
            )
            .first()
        )
        if existing:
            return False
        self.db.add(
            ComercialTracking(
                comercial_user_id=comercial_user_id,
                client_id=client.id,
                manager_id=manager_id,
                manager_name=manager_name,
                current_day=config.COMERCIAL_TRACKING_START_DAY,
            )
        )
        self.db.flush()
        return True

    def create_marcar_consultoria_task(self, client_id: int, *, acting_user_id: Optional[int] = None) -> bool:
        """Opens the "Marcar Consultoria" task (due in 24h) for a client entering the sales pipeline."""
        with transactional(self.db):
            client = self.db.get(Client, client_id)
            if client is None:
                raise ClientNotFound(f"Client {client_id} not found")
            return self._create_marcar_consultoria_task(client, acting_user_id)

    def _create_marcar_consultoria_task(self, client: Client, acting_user_id: Optional[int]) -> bool:
        return self._create_auto_task(
            client,
            ComercialAutoTaskType.MARCAR_CONSULTORIA,
            title=f"Marcar Consultoria Comercial - {client.name}",
            description=f"Agendar consultoria comercial com o cliente {client.name}",
            user_id=client.assigned_comercial_id or acting_user_id,
            due_date=self.clock.now() + timedelta(hours=MARCAR_CONSULTORIA_DUE_HOURS),
        )

    def ensure_tasks_for_new_clients(self) -> InitialTasksResult:
        with transactional(self.db):
            clients = self.db.query(Client).filter(Client.comercial_status == ComercialStatus.NOVO).all()
            created = sum(1 for client in clients if self._create_marcar_consultoria_task(client, None))
        logger.info(f"Comercial task backfill: {created} created for {len(clients)} novo client(s)")
        return InitialTasksResult(clients_checked=len(clients), tasks_created=created)
