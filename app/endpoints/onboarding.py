import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.auth.permissions import get_current_user
from app.dependencies import get_db
from app.errors.client_errors import ClientNotFound
from app.errors.onboarding_errors import OnboardingTaskNotFound
from app.models.onboarding_task import OnboardingTaskStatus
from app.schemas.onboarding import AdvancementResponse, OnboardingTaskResponse
from app.services.onboarding import OnboardingAutomationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])

ONBOARDING_ROLES = ["ceo", "gestor_projetos", "gestor_ads"]
BOARD_OVERRIDE_ROLES = ["ceo", "gestor_projetos"]


@router.get("/tasks", response_model=List[OnboardingTaskResponse])
def list_onboarding_tasks(
    assigned_to_id: Optional[int] = None,
    client_id: Optional[int] = None,
    status: Optional[OnboardingTaskStatus] = None,
    limit: int = 100,
    offset: int = 0,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user(ONBOARDING_ROLES)),
):
    """
    Tasks of one manager's board. Defaults to the caller's own tasks; CEO and
    project managers pass ``assigned_to_id`` to look at someone else's board.
    """
    if assigned_to_id is None and client_id is None:
        assigned_to_id = current_user["id"]
    service = OnboardingAutomationService(db)
    return service.list_tasks(
        assigned_to_id=assigned_to_id,
        client_id=client_id,
        status=status,
        limit=limit,
        offset=offset,
    )


@router.post("/tasks/{task_id}/complete", response_model=AdvancementResponse)
def complete_onboarding_task(
    task_id: int,
    acting_for_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user(ONBOARDING_ROLES)),
):
    """
    Marks the task done and advances the client when the task is an advancing one.
    ``acting_for_id`` lets a CEO complete a task on behalf of a manager.
    """
    if acting_for_id is not None and current_user.get("role") not in BOARD_OVERRIDE_ROLES:
        raise HTTPException(status_code=403, detail="Only CEO and project managers may act for another manager")
    service = OnboardingAutomationService(db)
    try:
        result = service.complete_onboarding_task(task_id, acting_user_id=acting_for_id or current_user["id"])
    except OnboardingTaskNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ClientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return AdvancementResponse(**result.model_dump(), message=result.summary_message())


@router.post("/tasks/{task_id}/archive", response_model=OnboardingTaskResponse)
def archive_onboarding_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user(BOARD_OVERRIDE_ROLES)),
):
    service = OnboardingAutomationService(db)
    try:
        return service.archive_task(task_id)
    except OnboardingTaskNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/clients/{client_id}/initial-task", response_model=Optional[OnboardingTaskResponse])
def create_initial_onboarding_task(
    client_id: int,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user(ONBOARDING_ROLES)),
):
    """Creates "Marcar call 1" for the client; returns null when it already exists."""
    service = OnboardingAutomationService(db)
    try:
        return service.create_initial_task(client_id, acting_user_id=current_user["id"])
    except ClientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
