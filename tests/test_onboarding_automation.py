from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from app.errors.onboarding_errors import OnboardingTaskNotFound
from app.models import (
    ClientDailyTracking,
    ComercialStatus,
    ClientOnboarding,
    ClientStatus,
    OnboardingStep,
    OnboardingTask,
    OnboardingTaskStatus,
    OnboardingTaskType,
)
from app.services.onboarding import OnboardingAutomationService
from app.utils.clock import as_utc


def _add_task(db_session, client, task_type, milestone=1, assigned_to_id=None):
    task = OnboardingTask(
        client_id=client.id,
        assigned_to_id=assigned_to_id or client.assigned_ads_manager_id,
        task_type=task_type,
        title=task_type.value,
        status=OnboardingTaskStatus.PENDING,
        milestone=milestone,
        archived=False,
    )
    db_session.add(task)
    db_session.commit()
    db_session.refresh(task)
    return task


def _add_onboarding(db_session, client, milestone, step):
    onboarding = ClientOnboarding(client_id=client.id, current_milestone=milestone, current_step=step)
    db_session.add(onboarding)
    db_session.commit()
    return onboarding


def _active_tasks(db_session, client):
    return (
        db_session.query(OnboardingTask)
        .filter(OnboardingTask.client_id == client.id, OnboardingTask.archived.is_(False))
        .all()
    )


@pytest.fixture
def service(db_session, frozen_clock):
    return OnboardingAutomationService(db_session, clock=frozen_clock)


def test_marcar_call_1_moves_new_client_into_onboarding(db_session, service, test_new_client, frozen_now):
    task = _add_task(db_session, test_new_client, OnboardingTaskType.MARCAR_CALL_1)

    result = service.complete_onboarding_task(task.id)

    assert result.task_completed
    assert result.client_moved
    assert result.tasks_created == 1
    assert result.next_step == OnboardingStep.CALL_1_MARCADA
    assert result.next_milestone == 1

    assert task.status == OnboardingTaskStatus.DONE
    assert as_utc(task.completed_at) == frozen_now
    assert test_new_client.status == ClientStatus.ONBOARDING
    assert as_utc(test_new_client.onboarding_started_at) == frozen_now

    onboarding = db_session.query(ClientOnboarding).filter_by(client_id=test_new_client.id).one()
    assert onboarding.current_milestone == 1
    assert onboarding.current_step == OnboardingStep.CALL_1_MARCADA
    assert as_utc(onboarding.milestone_1_started_at) == frozen_now

    follow_up = (
        db_session.query(OnboardingTask)
        .filter_by(client_id=test_new_client.id, task_type=OnboardingTaskType.REALIZAR_CALL_1)
        .one()
    )
    assert follow_up.status == OnboardingTaskStatus.PENDING
    assert follow_up.assigned_to_id == test_new_client.assigned_ads_manager_id
    assert follow_up.milestone == 1
    assert as_utc(follow_up.due_date) == frozen_now + timedelta(days=2)
    assert "Padaria Central" in follow_up.description


def test_realizar_call_1_opens_milestone_2(db_session, service, test_new_client, frozen_now):
    _add_onboarding(db_session, test_new_client, 1, OnboardingStep.CALL_1_MARCADA)
    task = _add_task(db_session, test_new_client, OnboardingTaskType.REALIZAR_CALL_1)

    result = service.complete_onboarding_task(task.id)

    assert result.next_step == OnboardingStep.CRIAR_ESTRATEGIA
    assert result.next_milestone == 2
    assert result.tasks_created == 1

    onboarding = db_session.query(ClientOnboarding).filter_by(client_id=test_new_client.id).one()
    assert onboarding.current_milestone == 2
    assert as_utc(onboarding.milestone_2_started_at) == frozen_now

    created = (
        db_session.query(OnboardingTask)
        .filter_by(client_id=test_new_client.id, task_type=OnboardingTaskType.ENVIAR_ESTRATEGIA)
        .one()
    )
    assert created.title == "Enviar estratégia PRO + do(a) Padaria Central"
    assert created.milestone == 2
    assert as_utc(created.due_date) == frozen_now + timedelta(days=3)


def test_enviar_estrategia_creates_four_parallel_tasks(db_session, service, test_new_client):
    _add_onboarding(db_session, test_new_client, 2, OnboardingStep.CRIAR_ESTRATEGIA)
    task = _add_task(db_session, test_new_client, OnboardingTaskType.ENVIAR_ESTRATEGIA, milestone=2)

    result = service.complete_onboarding_task(task.id)

    assert result.tasks_created == 4
    assert result.next_milestone == 3
    assert "4 novas tarefas" in result.summary_message()

    pending = {
        t.task_type
        for t in _active_tasks(db_session, test_new_client)
        if t.status == OnboardingTaskStatus.PENDING
    }
    assert pending == {
        OnboardingTaskType.ANEXAR_LINK_CONSULTORIA,
        OnboardingTaskType.CERTIFICAR_CONSULTORIA,
        OnboardingTaskType.ENVIAR_LINK_DRIVE,
        OnboardingTaskType.BRIFAR_CRIATIVOS,
    }


def test_auxiliary_task_completes_without_moving_client(db_session, service, test_new_client):
    onboarding = _add_onboarding(db_session, test_new_client, 3, OnboardingStep.BRIFAR_CRIATIVOS)
    task = _add_task(db_session, test_new_client, OnboardingTaskType.ENVIAR_LINK_DRIVE, milestone=3)

    result = service.complete_onboarding_task(task.id)

    assert result.task_completed
    assert result.is_auxiliary_task
    assert not result.client_moved
    assert result.tasks_created == 0
    assert task.status == OnboardingTaskStatus.DONE
    assert onboarding.current_milestone == 3
    assert onboarding.current_step == OnboardingStep.BRIFAR_CRIATIVOS
    assert test_new_client.status == ClientStatus.NEW_CLIENT
    assert test_new_client.comercial_status == ComercialStatus.NOVO
    assert len(_active_tasks(db_session, test_new_client)) == 1


def test_completing_twice_is_a_no_op(db_session, service, test_new_client):
    task = _add_task(db_session, test_new_client, OnboardingTaskType.MARCAR_CALL_1)

    service.complete_onboarding_task(task.id)
    tasks_after_first = len(_active_tasks(db_session, test_new_client))
    second = service.complete_onboarding_task(task.id)

    assert second.already_completed
    assert not second.client_moved
    assert second.tasks_created == 0
    assert len(_active_tasks(db_session, test_new_client)) == tasks_after_first


def test_follow_up_not_duplicated_when_already_open(db_session, service, test_new_client):
    _add_task(db_session, test_new_client, OnboardingTaskType.REALIZAR_CALL_1)
    task = _add_task(db_session, test_new_client, OnboardingTaskType.MARCAR_CALL_1)

    result = service.complete_onboarding_task(task.id)

    assert result.client_moved
    assert result.tasks_created == 0
    count = (
        db_session.query(OnboardingTask)
        .filter_by(client_id=test_new_client.id, task_type=OnboardingTaskType.REALIZAR_CALL_1)
        .count()
    )
    assert count == 1


def test_milestone_never_goes_backwards(db_session, service, test_new_client):
    onboarding = _add_onboarding(db_session, test_new_client, 5, OnboardingStep.CONFIGURAR_CONTA_ANUNCIOS)
    task = _add_task(db_session, test_new_client, OnboardingTaskType.MARCAR_CALL_1)

    service.complete_onboarding_task(task.id)

    assert onboarding.current_milestone == 5
    assert onboarding.current_step == OnboardingStep.CONFIGURAR_CONTA_ANUNCIOS


def test_publicar_campanha_finishes_onboarding(db_session, service, test_new_client, frozen_now):
    test_new_client.status = ClientStatus.ONBOARDING
    db_session.commit()
    onboarding = _add_onboarding(db_session, test_new_client, 5, OnboardingStep.ESPERANDO_CRIATIVOS)
    task = _add_task(db_session, test_new_client, OnboardingTaskType.PUBLICAR_CAMPANHA, milestone=5)

    result = service.complete_onboarding_task(task.id)

    assert result.onboarding_completed
    assert result.client_moved
    assert result.tasks_created == 0
    assert result.next_step == OnboardingStep.ACOMPANHAMENTO
    assert result.next_milestone == 6
    # 2026-03-04 is a Wednesday in São Paulo
    assert result.day_of_week == "quarta"
    assert "Acompanhamento - Quarta" in result.summary_message()

    assert test_new_client.status == ClientStatus.ACTIVE
    assert as_utc(test_new_client.campaign_published_at) == frozen_now
    assert onboarding.current_milestone == 6
    assert onboarding.current_step == OnboardingStep.ACOMPANHAMENTO
    assert as_utc(onboarding.completed_at) == frozen_now
    assert as_utc(onboarding.milestone_6_started_at) == frozen_now

    tracking = db_session.query(ClientDailyTracking).filter_by(client_id=test_new_client.id).one()
    assert tracking.current_day == "quarta"
    assert tracking.ads_manager_id == test_new_client.assigned_ads_manager_id
    assert tracking.is_delayed is False
    assert as_utc(tracking.last_moved_at) == frozen_now


def test_unassigned_client_falls_back_to_acting_user(db_session, service, test_unassigned_client, test_ceo):
    task = _add_task(db_session, test_unassigned_client, OnboardingTaskType.MARCAR_CALL_1, assigned_to_id=test_ceo.id)

    service.complete_onboarding_task(task.id, acting_user_id=test_ceo.id)

    follow_up = (
        db_session.query(OnboardingTask)
        .filter_by(client_id=test_unassigned_client.id, task_type=OnboardingTaskType.REALIZAR_CALL_1)
        .one()
    )
    assert follow_up.assigned_to_id == test_ceo.id


def test_missing_task_raises(service):
    with pytest.raises(OnboardingTaskNotFound):
        service.complete_onboarding_task(9999)


def test_initial_task_created_once(db_session, service, test_new_client):
    first = service.create_initial_task(test_new_client.id)
    second = service.create_initial_task(test_new_client.id)

    assert first is not None
    assert first.task_type == OnboardingTaskType.MARCAR_CALL_1
    assert first.title == "Marcar call 1"
    assert second is None


def test_archived_task_frees_the_slot(db_session, service, test_new_client):
    first = service.create_initial_task(test_new_client.id)
    service.archive_task(first.id)

    again = service.create_initial_task(test_new_client.id)

    assert again is not None
    assert again.id != first.id
    assert service.list_tasks(client_id=test_new_client.id) == [again]
    assert len(service.list_tasks(client_id=test_new_client.id, include_archived=True)) == 2


def test_backfill_only_touches_new_clients(db_session, service, test_new_client, test_unassigned_client):
    test_unassigned_client.status = ClientStatus.ACTIVE
    db_session.commit()

    result = service.ensure_initial_tasks_for_new_clients()
    again = service.ensure_initial_tasks_for_new_clients()

    assert result.clients_checked == 1
    assert result.tasks_created == 1
    assert again.tasks_created == 0


def test_list_tasks_filters_by_assignee(db_session, service, test_new_client, test_ads_manager, test_ceo):
    mine = _add_task(db_session, test_new_client, OnboardingTaskType.MARCAR_CALL_1)
    _add_task(db_session, test_new_client, OnboardingTaskType.ENVIAR_LINK_DRIVE, assigned_to_id=test_ceo.id)

    assert service.list_tasks(assigned_to_id=test_ads_manager.id) == [mine]


def test_duplicate_live_task_is_rejected_by_the_database(db_session, test_new_client):
    _add_task(db_session, test_new_client, OnboardingTaskType.MARCAR_CALL_1)

    db_session.add(
        OnboardingTask(
            client_id=test_new_client.id,
            task_type=OnboardingTaskType.MARCAR_CALL_1,
            title="duplicate",
            status=OnboardingTaskStatus.PENDING,
            milestone=1,
            archived=False,
        )
    )
    with pytest.raises(IntegrityError):
        db_session.flush()
    db_session.rollback()


def test_retrying_publicar_campanha_keeps_one_tracking_row(db_session, service, test_new_client):
    _add_onboarding(db_session, test_new_client, 5, OnboardingStep.ESPERANDO_CRIATIVOS)
    task = _add_task(db_session, test_new_client, OnboardingTaskType.PUBLICAR_CAMPANHA, milestone=5)

    service.complete_onboarding_task(task.id)
    tasks_before = len(_active_tasks(db_session, test_new_client))
    retry = service.complete_onboarding_task(task.id)

    assert retry.already_completed
    assert db_session.query(ClientDailyTracking).filter_by(client_id=test_new_client.id).count() == 1
    assert len(_active_tasks(db_session, test_new_client)) == tasks_before


def test_brifar_criativos_opens_milestone_4(db_session, service, test_new_client, frozen_now):
    _add_onboarding(db_session, test_new_client, 3, OnboardingStep.BRIFAR_CRIATIVOS)
    task = _add_task(db_session, test_new_client, OnboardingTaskType.BRIFAR_CRIATIVOS, milestone=3)

    result = service.complete_onboarding_task(task.id)

    assert result.client_moved
    assert result.tasks_created == 2
    assert result.next_milestone == 4
    assert result.next_step == OnboardingStep.ELENCAR_OTIMIZACOES

    onboarding = db_session.query(ClientOnboarding).filter_by(client_id=test_new_client.id).one()
    assert onboarding.current_milestone == 4
    assert onboarding.current_step == OnboardingStep.ELENCAR_OTIMIZACOES
    assert as_utc(onboarding.milestone_4_started_at) == frozen_now

    pending = {
        t.task_type
        for t in _active_tasks(db_session, test_new_client)
        if t.status == OnboardingTaskStatus.PENDING
    }
    assert pending == {OnboardingTaskType.BRIFAR_OTIMIZACOES, OnboardingTaskType.AVISAR_PRAZO_CRIATIVOS}
