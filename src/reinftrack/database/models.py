"""SQLAlchemy models for reinftrack database.

Table and column names match the original schema, so attribute names here are
Portuguese; the mappers translate them into domain entities.
"""

import uuid
from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    CheckConstraint,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _new_uuid() -> str:
    return str(uuid.uuid4())


class RegimePeriodConfig(Base):
    """Default period granularity per tax regime."""

    __tablename__ = "regime_period_config"

    id = Column(Integer, primary_key=True)
    regime = Column(String, unique=True, nullable=False)
    periodo_tipo = Column(String, default="trimestral", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        CheckConstraint("periodo_tipo IN ('trimestral', 'mensal')", name="ck_regime_periodo_tipo"),
    )


class Company(Base):
    """Company model."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    nome = Column(String, nullable=False)
    razao_social = Column(String, nullable=False)
    cnpj = Column(String(14), nullable=False)
    regime = Column(String, ForeignKey("regime_period_config.regime"), nullable=False)
    periodo_tipo = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entries = relationship("ReinfEntry", back_populates="company")


class Role(Base):
    """Department (sector) model."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    authority = Column(String, default="none", nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    profiles = relationship("Profile", back_populates="role")


class AuthAccount(Base):
    """Login credential stored by the local identity provider."""

    __tablename__ = "auth_accounts"

    id = Column(String(36), primary_key=True, default=_new_uuid)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Profile(Base):
    """User profile model; its ID is the identity account ID."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    role = relationship("Role", back_populates="profiles")


class ReinfEntry(Base):
    """Quarterly profit declaration entry."""

    __tablename__ = "reinf_entries"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    ano = Column(Integer, nullable=False)
    trimestre = Column(Integer, nullable=False)
    lucro_mes1 = Column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    lucro_mes2 = Column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    lucro_mes3 = Column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    status = Column(String, default="pendente_contabil", nullable=False)
    contabil_usuario_id = Column(String(36), nullable=True)
    contabil_preenchido_em = Column(DateTime, nullable=True)
    dp_usuario_id = Column(String(36), nullable=True)
    dp_aprovado_em = Column(DateTime, nullable=True)
    fiscal_usuario_id = Column(String(36), nullable=True)
    fiscal_enviado_em = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # One entry per company per quarter
    __table_args__ = (
        UniqueConstraint("company_id", "ano", "trimestre", name="uq_entry_company_period"),
        CheckConstraint("trimestre BETWEEN 1 AND 4", name="ck_entry_trimestre"),
        CheckConstraint(
            "lucro_mes1 >= 0 AND lucro_mes2 >= 0 AND lucro_mes3 >= 0",
            name="ck_entry_lucro_non_negative",
        ),
        CheckConstraint(
            "status IN ('pendente_contabil', 'contabil_ok', 'dp_aprovado', 'enviado')",
            name="ck_entry_status",
        ),
    )

    # Relationships
    company = relationship("Company", back_populates="entries")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
