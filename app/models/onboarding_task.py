from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import relationship

from app.database import Base


class OnboardingTaskType(PyEnum):
    # Advancing tasks
    MARCAR_CALL_1 = "marcar_call_1"
    REALIZAR_CALL_1 = "realizar_call_1"
    ENVIAR_ESTRATEGIA = "enviar_estrategia"
    BRIFAR_CRIATIVOS = "brifar_criativos"
    BRIFAR_OTIMIZACOES = "brifar_otimizacoes"
    CONFIGURAR_CONTA_ANUNCIOS = "configurar_conta_anuncios"
    CERTIFICAR_CONSULTORIA_REALIZADA = "certificar_consultoria_realizada"
    PUBLICAR_CAMPANHA = "publicar_campanha"
    # Auxiliary tasks
    ANEXAR_LINK_CONSULTORIA = "anexar_link_consultoria"
    CERTIFICAR_CONSULTORIA = "certificar_consultoria"
    ENVIAR_LINK_DRIVE = "enviar_link_drive"
    AVISAR_PRAZO_CRIATIVOS = "avisar_prazo_criativos"


class OnboardingTaskStatus(PyEnum):
    PENDING = "pending"
    DONE = "done"


class OnboardingTask(Base):
    __tablename__ = "onboarding_tasks"
    __table_args__ = (
        # One live task per (client, type); archived rows free the slot
        Index(
            "uq_onboarding_tasks_client_type_active",
            "client_id",
            "task_type",
            unique=True,
            postgresql_where=text("NOT archived"),
            sqlite_where=text("NOT archived"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_to_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    task_type = Column(Enum(OnboardingTaskType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        Enum(OnboardingTaskStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=OnboardingTaskStatus.PENDING,
    )
    due_date = Column(DateTime(timezone=True), nullable=True)
    milestone = Column(Integer, nullable=False)
    archived = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    completed_at = Column(DateTime(timezone=True), nullable=True)

    client = relationship("Client")
    assigned_to = relationship("User")
