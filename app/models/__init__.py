from .user import UserRole, User
from .client import ClientStatus, ComercialStatus, Client
from .client_onboarding import MAX_MILESTONE, OnboardingStep, ClientOnboarding
from .onboarding_task import OnboardingTaskType, OnboardingTaskStatus, OnboardingTask
from .client_daily_tracking import ClientDailyTracking
from .comercial_task import ComercialAutoTaskType, ComercialTaskStatus, ComercialTask, ComercialTracking
from .delay_notification import DelayNotificationType, DelayNotification, DelayJustification
from .kanban_card import KanbanBoard, KanbanCard, CardCompletionNotification
