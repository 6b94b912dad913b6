import pytest

from app.models.client_onboarding import MAX_MILESTONE, OnboardingStep
from app.models.onboarding_task import OnboardingTaskType
from app.services.task_definitions import (
    AUXILIARY_TASK_TYPES,
    INITIAL_TASK_TYPE,
    TASK_DEFINITIONS,
    get_definition,
    is_advancing,
)


def test_every_task_type_is_classified_exactly_once():
    advancing = set(TASK_DEFINITIONS)
    assert advancing.isdisjoint(AUXILIARY_TASK_TYPES)
    assert advancing | AUXILIARY_TASK_TYPES == set(OnboardingTaskType)


@pytest.mark.parametrize("task_type", sorted(AUXILIARY_TASK_TYPES, key=lambda t: t.value))
def test_auxiliary_types_have_no_definition(task_type):
    assert get_definition(task_type) is None
    assert not is_advancing(task_type)


def test_initial_task_is_marcar_call_1():
    assert INITIAL_TASK_TYPE == OnboardingTaskType.MARCAR_CALL_1
    definition = get_definition(INITIAL_TASK_TYPE)
    assert definition.milestone == 1
    assert definition.next_step == OnboardingStep.CALL_1_MARCADA
    assert definition.next_milestone == 1
    assert definition.next_task_type == OnboardingTaskType.REALIZAR_CALL_1


def test_realizar_call_1_opens_milestone_2():
    definition = get_definition(OnboardingTaskType.REALIZAR_CALL_1)
    assert definition.next_step == OnboardingStep.CRIAR_ESTRATEGIA
    assert definition.next_milestone == 2
    assert [f.task_type for f in definition.follow_ups] == [OnboardingTaskType.ENVIAR_ESTRATEGIA]


def test_enviar_estrategia_spawns_four_parallel_tasks_with_one_advancing():
    definition = get_definition(OnboardingTaskType.ENVIAR_ESTRATEGIA)
    types = [f.task_type for f in definition.follow_ups]

    assert len(types) == 4
    assert [t for t in types if is_advancing(t)] == [OnboardingTaskType.BRIFAR_CRIATIVOS]
    assert all(f.milestone == 3 for f in definition.follow_ups)


def test_publicar_campanha_is_the_only_terminal_task():
    terminal = [t for t, d in TASK_DEFINITIONS.items() if d.is_terminal]
    assert terminal == [OnboardingTaskType.PUBLICAR_CAMPANHA]

    definition = TASK_DEFINITIONS[OnboardingTaskType.PUBLICAR_CAMPANHA]
    assert definition.next_milestone == MAX_MILESTONE
    assert definition.next_step == OnboardingStep.ACOMPANHAMENTO
    assert definition.follow_ups == ()
    assert definition.next_task_type is None


def test_milestones_never_go_backwards():
    for task_type, definition in TASK_DEFINITIONS.items():
        assert definition.milestone <= definition.next_milestone <= MAX_MILESTONE, task_type
        for follow_up in definition.follow_ups:
            assert follow_up.milestone >= definition.milestone, (task_type, follow_up.task_type)


def test_follow_up_titles_mention_the_client():
    definition = get_definition(OnboardingTaskType.ENVIAR_ESTRATEGIA)
    titles = [f.render_title("Padaria Central") for f in definition.follow_ups]
    assert all("Padaria Central" in title for title in titles)
    assert "Brifar criativos do(a) Padaria Central" in titles


def test_description_rendering_appends_client_name():
    definition = get_definition(OnboardingTaskType.MARCAR_CALL_1)
    assert definition.render_description("ACME").endswith("Cliente: ACME.")
