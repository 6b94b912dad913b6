from .onboarding import AdvancementResult, AdvancementResponse, OnboardingTaskResponse, InitialTasksResult
from .comercial import ComercialTaskCompleteRequest, ComercialAdvancementResult
from .delay import DelayScanResult, DelayNotificationResponse, JustificationCreate, DelayJustificationResponse
from .kanban import CardMoveRequest, MoveCardResult, CompletionNotificationResponse
