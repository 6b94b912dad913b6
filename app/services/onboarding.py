import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.database import transactional
from app.errors.client_errors import ClientNotFound
from app.errors.onboarding_errors import OnboardingTaskNotFound
from app.models import (
    Client,
    ClientDailyTracking,
    ClientOnboarding,
    ClientStatus,
    OnboardingStep,
    OnboardingTask,
    OnboardingTaskStatus,
    OnboardingTaskType,
)
from app.schemas.onboarding import AdvancementResult, InitialTasksResult
from app.services.task_definitions import INITIAL_TASK_TYPE, TASK_DEFINITIONS, TaskDefinition, get_definition
from app.utils.clock import Clock

logger = logging.getLogger(__name__)


class OnboardingAutomationService:
    """
    Moves clients through the onboarding milestones as their tasks are completed.

    Each public operation runs inside a single ``transactional`` block, so a
    failure in any step (e.g. a follow-up insert) rolls back the whole
    advancement, including marking the task done.
    """

    def __init__(self, db: Session, clock: Optional[Clock] = None):
        self.db = db
        self.clock = clock or Clock()

    def complete_onboarding_task(self, task_id: int, *, acting_user_id: Optional[int] = None) -> AdvancementResult:
        """
        Marks the task done and runs the automation attached to its type.

        ``acting_user_id`` is the manager on whose behalf the action runs; it is
        the fallback assignee for follow-up tasks when the client has no ads
        manager assigned.
        """
        with transactional(self.db):
            return self._complete(task_id, acting_user_id)

    def _complete(self, task_id: int, acting_user_id: Optional[int]) -> AdvancementResult:
        task = self.db.get(OnboardingTask, task_id)
        if task is None:
            raise OnboardingTaskNotFound(f"Onboarding task {task_id} not found")

        if task.status == OnboardingTaskStatus.DONE:
            logger.info(f"Task {task_id} ({task.task_type.value}) already done; skipping automation")
            return AdvancementResult(already_completed=True)

        now = self.clock.now()
        task.status = OnboardingTaskStatus.DONE
        task.completed_at = now
        self.db.flush()

        definition = get_definition(task.task_type)
        if definition is None:
            logger.info(f"Task {task_id} completed without automation (auxiliary task {task.task_type.value})")
            return AdvancementResult(is_auxiliary_task=True)

        client = self.db.get(Client, task.client_id)
        if client is None:
            raise ClientNotFound(f"Client {task.client_id} not found")

        onboarding = self._advance_onboarding(client, definition, now)

        if definition.is_terminal:
            day_name = self._finish_onboarding(client, onboarding, now, acting_user_id)
            return AdvancementResult(
                client_moved=True,
                next_step=OnboardingStep.ACOMPANHAMENTO,
                next_milestone=definition.next_milestone,
                onboarding_completed=True,
                day_of_week=day_name,
            )

        if client.status == ClientStatus.NEW_CLIENT:
            client.status = ClientStatus.ONBOARDING
            client.onboarding_started_at = now
            logger.info(f"Client {client.id} moved from new_client to onboarding")

        tasks_created = self._create_follow_ups(client, definition, now, acting_user_id)
        logger.info(
            f"Client {client.id} advanced to step {definition.next_step.value} "
            f"(milestone {definition.next_milestone}); {tasks_created} task(s) created"
        )
        return AdvancementResult(
            client_moved=True,
            tasks_created=tasks_created,
            next_step=definition.next_step,
            next_milestone=definition.next_milestone,
        )

    def _advance_onboarding(self, client: Client, definition: TaskDefinition, now: datetime) -> ClientOnboarding:
        onboarding = self.db.query(ClientOnboarding).filter(ClientOnboarding.client_id == client.id).first()
        if onboarding is None:
            onboarding = ClientOnboarding(
                client_id=client.id,
                current_milestone=1,
                current_step=OnboardingStep.MARCAR_CALL_1,
                milestone_1_started_at=now,
            )
            self.db.add(onboarding)
            logger.info(f"Created onboarding record for client {client.id}")

        if definition.next_milestone < onboarding.current_milestone:
            logger.warning(
                f"Client {client.id} is at milestone {onboarding.current_milestone}; "
                f"ignoring transition back to {definition.next_milestone}"
            )
            return onboarding

        if definition.next_milestone > onboarding.current_milestone:
            onboarding.stamp_milestone_start(definition.next_milestone, now)
        onboarding.current_step = definition.next_step
        onboarding.current_milestone = definition.next_milestone
        onboarding.updated_at = now
        self.db.flush()
        return onboarding

    def _finish_onboarding(
        self, client: Client, onboarding: ClientOnboarding, now: datetime, acting_user_id: Optional[int]
    ) -> str:
        """Promotes the client to active and places it on today's tracking board."""
        client.status = ClientStatus.ACTIVE
        client.campaign_published_at = now
        if onboarding.completed_at is None:
            onboarding.completed_at = now
        onboarding.current_step = OnboardingStep.ACOMPANHAMENTO

        day_name = self.clock.today_weekday_name(now)
        manager_id = client.assigned_ads_manager_id or acting_user_id

        tracking = self.db.query(ClientDailyTracking).filter(ClientDailyTracking.client_id == client.id).first()
        if tracking is None:
            tracking = ClientDailyTracking(client_id=client.id)
            self.db.add(tracking)
        tracking.ads_manager_id = manager_id
        tracking.current_day = day_name
        tracking.last_moved_at = now
        tracking.is_delayed = False
        self.db.flush()

        logger.info(f"Onboarding completed for client {client.id}; tracking on '{day_name}'")
        return day_name

    def _create_follow_ups(
        self, client: Client, definition: TaskDefinition, now: datetime, acting_user_id: Optional[int]
    ) -> int:
        assignee_id = self._assignee_for(client, acting_user_id)
        created = 0

        if definition.follow_ups:
            for follow_up in definition.follow_ups:
                if self._create_task_if_missing(
                    client,
                    follow_up.task_type,
                    title=follow_up.render_title(client.name),
                    description=follow_up.description,
                    due_days=follow_up.due_days,
                    milestone=follow_up.milestone,
                    assignee_id=assignee_id,
                    now=now,
                ):
                    created += 1
        elif definition.next_task_type is not None:
            next_definition = TASK_DEFINITIONS[definition.next_task_type]
            if self._create_task_if_missing(
                client,
                definition.next_task_type,
                title=next_definition.title,
                description=next_definition.render_description(client.name),
                due_days=next_definition.due_days,
                milestone=next_definition.milestone,
                assignee_id=assignee_id,
                now=now,
            ):
                created += 1
        return created

    def _create_task_if_missing(
        self,
        client: Client,
        task_type: OnboardingTaskType,
        *,
        title: str,
        description: str,
        due_days: int,
        milestone: int,
        assignee_id: Optional[int],
        now: datetime,
    ) -> bool:
        # The partial unique index backs this check; a concurrent duplicate
        # fails the flush and rolls back the enclosing transaction.
        if self._find_active_task(client.id, task_type) is not None:
            logger.debug(f"Task {task_type.value} already exists for client {client.id}; skipping")
            return False

        task = OnboardingTask(
            client_id=client.id,
            assigned_to_id=assignee_id,
            task_type=task_type,
            title=title,
            description=description,
            status=OnboardingTaskStatus.PENDING,
            due_date=self.clock.add_days(due_days, now),
            milestone=milestone,
            archived=False,
            created_at=now,
        )
        self.db.add(task)
        self.db.flush()
        return True

    def _find_active_task(self, client_id: int, task_type: OnboardingTaskType) -> Optional[OnboardingTask]:
        return (
            self.db.query(OnboardingTask)
            .filter(
                OnboardingTask.client_id == client_id,
                OnboardingTask.task_type == task_type,
                OnboardingTask.archived.is_(False),
            )
            .first()
        )

    def _assignee_for(self, client: Client, acting_user_id: Optional[int]) -> Optional[int]:
        assignee_id = client.assigned_ads_manager_id or acting_user_id
        if assignee_id is None:
            logger.warning(f"Client {client.id} has no ads manager and no acting user; tasks left unassigned")
        return assignee_id

    def create_initial_task(self, client_id: int, *, acting_user_id: Optional[int] = None) -> Optional[OnboardingTask]:
        """Creates the "Marcar call 1" task for a client. Returns ``None`` if it already exists."""
        with transactional(self.db):
            client = self.db.get(Client, client_id)
            if client is None:
                raise ClientNotFound(f"Client {client_id} not found")
            return self._create_initial_task(client, acting_user_id)

    def _create_initial_task(self, client: Client, acting_user_id: Optional[int]) -> Optional[OnboardingTask]:
        definition = TASK_DEFINITIONS[INITIAL_TASK_TYPE]
        created = self._create_task_if_missing(
            client,
            INITIAL_TASK_TYPE,
            title=definition.title,
            description=definition.render_description(client.name),
            due_days=definition.due_days,
            milestone=definition.milestone,
            assignee_id=self._assignee_for(client, acting_user_id),
            now=self.clock.now(),
        )
        if not created:
            return None
        logger.info(f"Initial onboarding task created for client {client.id}")
        return self._find_active_task(client.id, INITIAL_TASK_TYPE)

    def ensure_initial_tasks_for_new_clients(self) -> InitialTasksResult:
        """Backfills "Marcar call 1" for every client still in ``new_client``."""
        with transactional(self.db):
            clients = self.db.query(Client).filter(Client.status == ClientStatus.NEW_CLIENT).all()
            created = 0
            for client in clients:
                if self._create_initial_task(client, acting_user_id=None) is not None:
                    created += 1
        logger.info(f"Initial task backfill: {created} created for {len(clients)} new client(s)")
        return InitialTasksResult(clients_checked=len(clients), tasks_created=created)

    def list_tasks(
        self,
        *,
        assigned_to_id: Optional[int] = None,
        client_id: Optional[int] = None,
        status: Optional[OnboardingTaskStatus] = None,
        include_archived: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[OnboardingTask]:
        q = self.db.query(OnboardingTask)
        if assigned_to_id is not None:
            q = q.filter(OnboardingTask.assigned_to_id == assigned_to_id)
        if client_id is not None:
            q = q.filter(OnboardingTask.client_id == client_id)
        if status is not None:
            q = q.filter(OnboardingTask.status == status)
        if not include_archived:
            q = q.filter(OnboardingTask.archived.is_(False))
        return q.order_by(OnboardingTask.due_date.asc(), OnboardingTask.id.asc()).offset(offset).limit(limit).all()

    def archive_task(self, task_id: int) -> OnboardingTask:
        """Soft-deletes a task; a new task of the same type may then be created for the client."""
        with transactional(self.db):
            task = self.db.get(OnboardingTask, task_id)
            if task is None:
                raise OnboardingTaskNotFound(f"Onboarding task {task_id} not found")
            task.archived = True
        return task
