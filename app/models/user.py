from datetime import datetime, timezone
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String

from app.database import Base


class UserRole(PyEnum):
    CEO = "ceo"
    GESTOR_PROJETOS = "gestor_projetos"
    GESTOR_ADS = "gestor_ads"
    SUCESSO_CLIENTE = "sucesso_cliente"
    DESIGN = "design"
    EDITOR_VIDEO = "editor_video"
    DEVS = "devs"
    ATRIZES_GRAVACAO = "atrizes_gravacao"
    PRODUTORA = "produtora"
    GESTOR_CRM = "gestor_crm"
    CONSULTOR_COMERCIAL = "consultor_comercial"
    FINANCEIRO = "financeiro"
    RH = "rh"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    role = Column(Enum(UserRole, values_callable=lambda e: [m.value for m in e]), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
