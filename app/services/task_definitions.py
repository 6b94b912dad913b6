"""
Declarative table behind the onboarding state machine.

Only ADVANCING task types have an entry in ``TASK_DEFINITIONS``. Completing
one moves the client to ``next_step`` / ``next_milestone`` and may spawn
follow-up tasks. Auxiliary task types (created alongside advancing ones,
e.g. ``anexar_link_consultoria``) are deliberately absent: a failed lookup is
how the engine knows a completed task must not move the client.

Every ``OnboardingTaskType`` member is either in ``TASK_DEFINITIONS`` or in
``AUXILIARY_TASK_TYPES``; ``_check_table()`` enforces this at import time.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from app.models.client_onboarding import MAX_MILESTONE, OnboardingStep
from app.models.onboarding_task import OnboardingTaskType as T


@dataclass(frozen=True)
class FollowUpTask:
    task_type: T
    title_template: str
    description: str
    due_days: int
    milestone: int

    def render_title(self, client_name: str) -> str:
        return self.title_template.format(client_name=client_name)


@dataclass(frozen=True)
class TaskDefinition:
    title: str
    description: str
    due_days: int
    milestone: int
    next_step: OnboardingStep
    next_milestone: int
    next_task_type: Optional[T] = None
    follow_ups: Tuple[FollowUpTask, ...] = ()
    is_terminal: bool = False

    def render_description(self, client_name: str) -> str:
        return f"{self.description} Cliente: {client_name}."


POST_CALL_1_TASKS = (
    FollowUpTask(
        T.ENVIAR_ESTRATEGIA,
        "Enviar estratégia PRO + do(a) {client_name}",
        "Desenvolver e enviar a estratégia de marketing personalizada para o cliente.",
        due_days=3,
        milestone=2,
    ),
)

# Only brifar_criativos advances the client; the other three are auxiliary
POST_ESTRATEGIA_TASKS = (
    FollowUpTask(
        T.ANEXAR_LINK_CONSULTORIA,
        "Anexar link da consultoria do(a) {client_name}",
        "Anexar no grupo o link da consultoria comercial.",
        due_days=2,
        milestone=3,
    ),
    FollowUpTask(
        T.CERTIFICAR_CONSULTORIA,
        "Certificar acompanhamento comercial do(a) {client_name}",
        "Certificar que a consultoria comercial já foi marcada, se não, enviar link da consultoria.",
        due_days=2,
        milestone=3,
    ),
    FollowUpTask(
        T.ENVIAR_LINK_DRIVE,
        "Enviar e anexar no grupo o link do drive para {client_name}",
        "Enviar e anexar no grupo o link do drive para subir fotos e identidade visual.",
        due_days=2,
        milestone=3,
    ),
    FollowUpTask(
        T.BRIFAR_CRIATIVOS,
        "Brifar criativos do(a) {client_name}",
        "Criar o briefing dos criativos para o cliente.",
        due_days=3,
        milestone=3,
    ),
)

POST_BRIFAR_CRIATIVOS_TASKS = (
    FollowUpTask(
        T.BRIFAR_OTIMIZACOES,
        "Brifar otimizações pendentes do(a) {client_name}",
        "Elencar e brifar as otimizações pendentes para o cliente.",
        due_days=3,
        milestone=4,
    ),
    FollowUpTask(
        T.AVISAR_PRAZO_CRIATIVOS,
        "Avisar o(a) {client_name} o prazo de entrega dos criativos",
        "Informar ao cliente a data prevista para entrega dos criativos.",
        due_days=1,
        milestone=4,
    ),
)

POST_BRIFAR_OTIMIZACOES_TASKS = (
    FollowUpTask(
        T.CONFIGURAR_CONTA_ANUNCIOS,
        "Configurar conta de anúncios do(a) {client_name}",
        "Configurar a conta de anúncios para o cliente.",
        due_days=2,
        milestone=5,
    ),
)

POST_CONFIGURAR_CONTA_TASKS = (
    FollowUpTask(
        T.CERTIFICAR_CONSULTORIA_REALIZADA,
        "Certificar que a consultoria comercial do(a) {client_name} já foi realizada",
        "Verificar se a consultoria comercial do cliente já foi realizada.",
        due_days=2,
        milestone=5,
    ),
)

POST_CERTIFICAR_CONSULTORIA_TASKS = (
    FollowUpTask(
        T.PUBLICAR_CAMPANHA,
        "Publicar Campanha do(a) {client_name}",
        "Publicar a campanha de anúncios do cliente.",
        due_days=3,
        milestone=5,
    ),
)


TASK_DEFINITIONS: Dict[T, TaskDefinition] = {
    T.MARCAR_CALL_1: TaskDefinition(
        title="Marcar call 1",
        description="Agendar a primeira call com o cliente para alinhamento inicial.",
        due_days=1,
        milestone=1,
        next_step=OnboardingStep.CALL_1_MARCADA,
        next_milestone=1,
        next_task_type=T.REALIZAR_CALL_1,
    ),
    T.REALIZAR_CALL_1: TaskDefinition(
        title="Realizar call 1",
        description="Realizar a Call 1 com o cliente. Alinhar expectativas e colher briefing.",
        due_days=2,
        milestone=1,
        next_step=OnboardingStep.CRIAR_ESTRATEGIA,
        next_milestone=2,
        follow_ups=POST_CALL_1_TASKS,
    ),
    T.ENVIAR_ESTRATEGIA: TaskDefinition(
        title="Enviar estratégia",
        description="Enviar a estratégia desenvolvida para o cliente.",
        due_days=3,
        milestone=2,
        next_step=OnboardingStep.BRIFAR_CRIATIVOS,
        next_milestone=3,
        follow_ups=POST_ESTRATEGIA_TASKS,
    ),
    T.BRIFAR_CRIATIVOS: TaskDefinition(
        title="Brifar criativos",
        description="Criar o briefing dos criativos para o cliente.",
        due_days=3,
        milestone=3,
        next_step=OnboardingStep.ELENCAR_OTIMIZACOES,
        next_milestone=4,
        follow_ups=POST_BRIFAR_CRIATIVOS_TASKS,
    ),
    T.BRIFAR_OTIMIZACOES: TaskDefinition(
        title="Brifar otimizações pendentes",
        description="Elencar e brifar as otimizações pendentes para o cliente.",
        due_days=3,
        milestone=4,
        next_step=OnboardingStep.CONFIGURAR_CONTA_ANUNCIOS,
        next_milestone=5,
        follow_ups=POST_BRIFAR_OTIMIZACOES_TASKS,
    ),
    T.CONFIGURAR_CONTA_ANUNCIOS: TaskDefinition(
        title="Configurar conta de anúncios",
        description="Configurar a conta de anúncios para o cliente.",
        due_days=2,
        milestone=5,
        next_step=OnboardingStep.CERTIFICAR_CONSULTORIA,
        next_milestone=5,
        follow_ups=POST_CONFIGURAR_CONTA_TASKS,
    ),
    T.CERTIFICAR_CONSULTORIA_REALIZADA: TaskDefinition(
        title="Certificar consultoria realizada",
        description="Verificar se a consultoria comercial do cliente já foi realizada.",
        due_days=2,
        milestone=5,
        next_step=OnboardingStep.ESPERANDO_CRIATIVOS,
        next_milestone=5,
        follow_ups=POST_CERTIFICAR_CONSULTORIA_TASKS,
    ),
    T.PUBLICAR_CAMPANHA: TaskDefinition(
        title="Publicar Campanha",
        description="Publicar a campanha de anúncios do cliente.",
        due_days=3,
        milestone=5,
        next_step=OnboardingStep.ACOMPANHAMENTO,
        next_milestone=6,
        is_terminal=True,
    ),
}

AUXILIARY_TASK_TYPES: FrozenSet[T] = frozenset({
    T.ANEXAR_LINK_CONSULTORIA,
    T.CERTIFICAR_CONSULTORIA,
    T.ENVIAR_LINK_DRIVE,
    T.AVISAR_PRAZO_CRIATIVOS,
})

INITIAL_TASK_TYPE = T.MARCAR_CALL_1


def get_definition(task_type: T) -> Optional[TaskDefinition]:
    """Definition for an advancing task type; ``None`` means auxiliary."""
    return TASK_DEFINITIONS.get(task_type)


def is_advancing(task_type: T) -> bool:
    return task_type in TASK_DEFINITIONS


def _check_table() -> None:
    advancing = set(TASK_DEFINITIONS)
    overlap = advancing & AUXILIARY_TASK_TYPES
    if overlap:
        raise RuntimeError(f"Task types both advancing and auxiliary: {sorted(t.value for t in overlap)}")
    missing = set(T) - advancing - AUXILIARY_TASK_TYPES
    if missing:
        raise RuntimeError(f"Task types without a transition or auxiliary marker: {sorted(t.value for t in missing)}")

    for task_type, definition in TASK_DEFINITIONS.items():
        if not 1 <= definition.next_milestone <= MAX_MILESTONE:
            raise RuntimeError(f"{task_type.value}: next_milestone {definition.next_milestone} out of range")
        if definition.next_milestone < definition.milestone:
            raise RuntimeError(f"{task_type.value}: next_milestone goes backwards")
        if definition.is_terminal and (definition.next_task_type or definition.follow_ups):
            raise RuntimeError(f"{task_type.value}: terminal task cannot spawn follow-ups")
        if definition.next_task_type and definition.follow_ups:
            raise RuntimeError(f"{task_type.value}: use either next_task_type or follow_ups, not both")
        if definition.next_task_type and definition.next_task_type not in TASK_DEFINITIONS:
            raise RuntimeError(f"{task_type.value}: single next task must itself be advancing")


_check_table()
