from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.client_onboarding import OnboardingStep
from app.models.onboarding_task import OnboardingTaskStatus, OnboardingTaskType


class AdvancementResult(BaseModel):
    """Outcome of completing an onboarding task; rendered as a toast by the UI."""
    task_completed: bool = True
    client_moved: bool = False
    is_auxiliary_task: bool = False
    already_completed: bool = False
    tasks_created: int = 0
    next_step: Optional[OnboardingStep] = None
    next_milestone: Optional[int] = None
    onboarding_completed: bool = False
    day_of_week: Optional[str] = Field(None, description="Tracking board day when onboarding completed")

    def summary_message(self) -> str:
        if self.already_completed or self.is_auxiliary_task:
            return "✅ Tarefa concluída!"
        if self.onboarding_completed:
            day = (self.day_of_week or "hoje").capitalize()
            return f"🎉 Onboarding concluído! Cliente movido para Acompanhamento - {day}."
        if self.tasks_created > 1:
            return (
                f"🎉 Tarefa concluída! Cliente movido para Marco {self.next_milestone} "
                f"e {self.tasks_created} novas tarefas criadas."
            )
        if self.tasks_created == 1:
            return "🎉 Tarefa concluída! Cliente movido e nova tarefa criada."
        return "🎉 Tarefa concluída! Cliente avançou no onboarding."


class AdvancementResponse(AdvancementResult):
    message: str


class OnboardingTaskResponse(BaseModel):
    id: int
    client_id: int
    assigned_to_id: Optional[int] = None
    task_type: OnboardingTaskType
    title: str
    description: Optional[str] = None
    status: OnboardingTaskStatus
    due_date: Optional[datetime] = None
    milestone: int
    archived: bool
    created_at: datetime
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class InitialTasksResult(BaseModel):
    clients_checked: int
    tasks_created: int
