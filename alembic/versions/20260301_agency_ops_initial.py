"""agency ops: users, clients, onboarding, comercial, delays, kanban

Revision ID: 20260301_agency_ops
Revises:
Create Date: 2026-03-01 00:00:00.000000

"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '20260301_agency_ops'
down_revision = None
branch_labels = None
depends_on = None


USER_ROLES = (
    'ceo', 'gestor_projetos', 'gestor_ads', 'sucesso_cliente', 'design', 'editor_video', 'devs',
    'atrizes_gravacao', 'produtora', 'gestor_crm', 'consultor_comercial', 'financeiro', 'rh',
)
ONBOARDING_STEPS = (
    'marcar_call_1', 'call_1_marcada', 'criar_estrategia', 'brifar_criativos', 'elencar_otimizacoes',
    'configurar_conta_anuncios', 'certificar_consultoria', 'esperando_criativos', 'acompanhamento',
)
ONBOARDING_TASK_TYPES = (
    'marcar_call_1', 'realizar_call_1', 'enviar_estrategia', 'brifar_criativos', 'brifar_otimizacoes',
    'configurar_conta_anuncios', 'certificar_consultoria_realizada', 'publicar_campanha',
    'anexar_link_consultoria', 'certificar_consultoria', 'enviar_link_drive', 'avisar_prazo_criativos',
)
DELAY_TYPES = ('novo_cliente_24h', 'onboarding_5d', 'acompanhamento')
BOARDS = ('design', 'devs', 'video', 'atrizes', 'produtora')

ENUM_TYPES = (
    'userrole', 'clientstatus', 'comercialstatus', 'onboardingstep', 'onboardingtasktype',
    'onboardingtaskstatus', 'comercialautotasktype', 'comercialtaskstatus', 'delaynotificationtype',
    'kanbanboard',
)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('role', sa.Enum(*USER_ROLES, name='userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'])

    op.create_table(
        'clients',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('cnpj', sa.String(), nullable=True),
        sa.Column('cpf', sa.String(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('new_client', 'onboarding', 'active', 'churned', 'archived', name='clientstatus'),
            nullable=False,
            server_default='new_client',
        ),
        sa.Column(
            'comercial_status',
            sa.Enum('novo', 'consultoria_marcada', 'consultoria_realizada', 'em_acompanhamento', name='comercialstatus'),
            nullable=False,
            server_default='novo',
        ),
        sa.Column('assigned_ads_manager_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('assigned_comercial_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('group_id', sa.String(), nullable=True),
        sa.Column('entry_date', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('onboarding_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('campaign_published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('comercial_entered_at', sa.DateTime(timezone=True), nullable=True, server_default=sa.func.now()),
        sa.Column('comercial_onboarding_started_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_clients_id', 'clients', ['id'])

    op.create_table(
        'client_onboarding',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('current_milestone', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('current_step', sa.Enum(*ONBOARDING_STEPS, name='onboardingstep'), nullable=False, server_default='marcar_call_1'),
        sa.Column('milestone_1_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('milestone_2_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('milestone_3_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('milestone_4_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('milestone_5_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('milestone_6_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_client_onboarding_id', 'client_onboarding', ['id'])

    op.create_table(
        'onboarding_tasks',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('assigned_to_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('task_type', sa.Enum(*ONBOARDING_TASK_TYPES, name='onboardingtasktype'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('pending', 'done', name='onboardingtaskstatus'), nullable=False, server_default='pending'),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('milestone', sa.Integer(), nullable=False),
        sa.Column('archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_onboarding_tasks_id', 'onboarding_tasks', ['id'])
    op.create_index('ix_onboarding_tasks_client_id', 'onboarding_tasks', ['client_id'])
    op.create_index(
        'uq_onboarding_tasks_client_type_active',
        'onboarding_tasks',
        ['client_id', 'task_type'],
        unique=True,
        postgresql_where=sa.text('NOT archived'),
    )

    op.create_table(
        'client_daily_tracking',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('ads_manager_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('current_day', sa.String(), nullable=False),
        sa.Column('last_moved_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('is_delayed', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_client_daily_tracking_id', 'client_daily_tracking', ['id'])

    op.create_table(
        'comercial_tasks',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.Enum('todo', 'doing', 'done', name='comercialtaskstatus'), nullable=False, server_default='todo'),
        sa.Column('related_client_id', sa.Integer(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=True),
        sa.Column('is_auto_generated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'auto_task_type',
            sa.Enum('marcar_consultoria', 'realizar_consultoria', name='comercialautotasktype'),
            nullable=True,
        ),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('related_client_id', 'auto_task_type', name='uq_comercial_tasks_client_auto_type'),
    )
    op.create_index('ix_comercial_tasks_id', 'comercial_tasks', ['id'])

    op.create_table(
        'comercial_tracking',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('comercial_user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=False),
        sa.Column('manager_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('manager_name', sa.String(), nullable=True),
        sa.Column('current_day', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('client_id', 'comercial_user_id', name='uq_comercial_tracking_client_user'),
    )
    op.create_index('ix_comercial_tracking_id', 'comercial_tracking', ['id'])

    op.create_table(
        'delay_notifications',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('user_name', sa.String(), nullable=True),
        sa.Column('notification_type', sa.Enum(*DELAY_TYPES, name='delaynotificationtype'), nullable=False),
        sa.Column('client_id', sa.Integer(), sa.ForeignKey('clients.id', ondelete='CASCADE'), nullable=True),
        sa.Column('client_name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'notification_type', 'client_id', name='uq_delay_notifications_user_type_client'),
    )
    op.create_index('ix_delay_notifications_id', 'delay_notifications', ['id'])

    op.create_table(
        'delay_justifications',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('notification_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('user_name', sa.String(), nullable=True),
        sa.Column('justification', sa.Text(), nullable=False),
        sa.Column(
            'notification_type',
            postgresql.ENUM(*DELAY_TYPES, name='delaynotificationtype', create_type=False),
            nullable=False,
        ),
        sa.Column('client_name', sa.String(), nullable=True),
        sa.Column('archived', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('archived_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('archived_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_delay_justifications_id', 'delay_justifications', ['id'])

    op.create_table(
        'kanban_cards',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('board', sa.Enum(*BOARDS, name='kanbanboard'), nullable=False),
        sa.Column('column_id', sa.String(), nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_kanban_cards_id', 'kanban_cards', ['id'])

    op.create_table(
        'card_completion_notifications',
        sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
        sa.Column('card_id', sa.Integer(), sa.ForeignKey('kanban_cards.id', ondelete='CASCADE'), nullable=False),
        sa.Column('card_title', sa.String(), nullable=False),
        sa.Column('board', postgresql.ENUM(*BOARDS, name='kanbanboard', create_type=False), nullable=False),
        sa.Column('completed_by_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('requester_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('read_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_card_completion_notifications_id', 'card_completion_notifications', ['id'])
    op.create_index('ix_card_completion_notifications_card_id', 'card_completion_notifications', ['card_id'])


def downgrade() -> None:
    for table in (
        'card_completion_notifications',
        'kanban_cards',
        'delay_justifications',
        'delay_notifications',
        'comercial_tracking',
        'comercial_tasks',
        'client_daily_tracking',
        'onboarding_tasks',
        'client_onboarding',
        'clients',
        'users',
    ):
        op.drop_table(table)
    for enum_name in ENUM_TYPES:
        op.execute(f"DROP TYPE IF EXISTS {enum_name}")
