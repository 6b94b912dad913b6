from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.database import Base


class ClientStatus(PyEnum):
    NEW_CLIENT = "new_client"
    ONBOARDING = "onboarding"
    ACTIVE = "active"
    CHURNED = "churned"
    ARCHIVED = "archived"


# Sales-side lifecycle. Advances independently of ClientStatus.
class ComercialStatus(PyEnum):
    NOVO = "novo"
    CONSULTORIA_MARCADA = "consultoria_marcada"
    CONSULTORIA_REALIZADA = "consultoria_realizada"
    EM_ACOMPANHAMENTO = "em_acompanhamento"


def _values(enum_cls):
    return [m.value for m in enum_cls]


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    cnpj = Column(String, nullable=True)
    cpf = Column(String, nullable=True)

    status = Column(
        Enum(ClientStatus, values_callable=_values), nullable=False, default=ClientStatus.NEW_CLIENT
    )
    comercial_status = Column(
        Enum(ComercialStatus, values_callable=_values), nullable=False, default=ComercialStatus.NOVO
    )

    assigned_ads_manager_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    assigned_comercial_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    group_id = Column(String, nullable=True)

    entry_date = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    onboarding_started_at = Column(DateTime(timezone=True), nullable=True)
    campaign_published_at = Column(DateTime(timezone=True), nullable=True)
    comercial_entered_at = Column(DateTime(timezone=True), nullable=True, default=lambda: datetime.now(timezone.utc))
    comercial_onboarding_started_at = Column(DateTime(timezone=True), nullable=True)

    assigned_ads_manager = relationship("User", foreign_keys=[assigned_ads_manager_id])
    assigned_comercial = relationship("User", foreign_keys=[assigned_comercial_id])
    onboarding = relationship("ClientOnboarding", back_populates="client", uselist=False)
