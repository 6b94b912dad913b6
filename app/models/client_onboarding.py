from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer
from sqlalchemy.orm import relationship

from app.database import Base


MAX_MILESTONE = 6


class OnboardingStep(PyEnum):
    MARCAR_CALL_1 = "marcar_call_1"
    CALL_1_MARCADA = "call_1_marcada"
    CRIAR_ESTRATEGIA = "criar_estrategia"
    BRIFAR_CRIATIVOS = "brifar_criativos"
    ELENCAR_OTIMIZACOES = "elencar_otimizacoes"
    CONFIGURAR_CONTA_ANUNCIOS = "configurar_conta_anuncios"
    CERTIFICAR_CONSULTORIA = "certificar_consultoria"
    ESPERANDO_CRIATIVOS = "esperando_criativos"
    ACOMPANHAMENTO = "acompanhamento"


class ClientOnboarding(Base):
    __tablename__ = "client_onboarding"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, unique=True)
    # Never decreases
    current_milestone = Column(Integer, nullable=False, default=1)
    current_step = Column(
        Enum(OnboardingStep, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=OnboardingStep.MARCAR_CALL_1,
    )

    milestone_1_started_at = Column(DateTime(timezone=True), nullable=True)
    milestone_2_started_at = Column(DateTime(timezone=True), nullable=True)
    milestone_3_started_at = Column(DateTime(timezone=True), nullable=True)
    milestone_4_started_at = Column(DateTime(timezone=True), nullable=True)
    milestone_5_started_at = Column(DateTime(timezone=True), nullable=True)
    milestone_6_started_at = Column(DateTime(timezone=True), nullable=True)

    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)

    client = relationship("Client", back_populates="onboarding")

    def stamp_milestone_start(self, milestone: int, at: datetime) -> None:
        if not 1 <= milestone <= MAX_MILESTONE:
            raise ValueError(f"Milestone must be between 1 and {MAX_MILESTONE}, got {milestone}")
        setattr(self, f"milestone_{milestone}_started_at", at)
