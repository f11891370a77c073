"""SQLAlchemy models for homeledger database."""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session
from sqlalchemy.types import TypeDecorator

Base = declarative_base()

ID_LENGTH = 64


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DecimalText(TypeDecorator):
    """Decimal stored as text so amounts keep the precision they were given."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)


class Account(Base):
    """Bank, cash or credit account model."""

    __tablename__ = "accounts"

    id = Column(String(ID_LENGTH), primary_key=True)
    name = Column(String, unique=True, nullable=False)
    type = Column(String(16), nullable=False)
    iban = Column(String(34), unique=True, nullable=True)
    is_savings = Column(Boolean, default=False, nullable=False)
    overdraft_limit_amount = Column(DecimalText, nullable=False)
    overdraft_limit_currency = Column(String(3), nullable=False)
    credit_limit_amount = Column(DecimalText, nullable=False)
    credit_limit_currency = Column(String(3), nullable=False)
    payment_due_day = Column(Integer, nullable=True)
    payment_due_shift = Column(String(8), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    entries = relationship("Entry", back_populates="account", passive_deletes="all")


class Group(Base):
    """Category group model."""

    __tablename__ = "groups"

    id = Column(String(ID_LENGTH), primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    categories = relationship("Category", back_populates="group")


class Category(Base):
    """Category model, ordered by position within its group."""

    __tablename__ = "categories"

    id = Column(String(ID_LENGTH), primary_key=True)
    name = Column(String, nullable=False)
    group_id = Column(
        String(ID_LENGTH), ForeignKey("groups.id", ondelete="SET NULL"), nullable=True
    )
    position = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("group_id", "name", name="uq_category_group_name"),)

    # Relationships
    group = relationship("Group", back_populates="categories")


class Payee(Base):
    """Payee model."""

    __tablename__ = "payees"

    id = Column(String(ID_LENGTH), primary_key=True)
    name = Column(String, unique=True, nullable=False)
    iban = Column(String(34), unique=True, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    rules = relationship("Rule", back_populates="payee", cascade="all, delete-orphan")


class Rule(Base):
    """Payee rule model."""

    __tablename__ = "rules"

    id = Column(String(ID_LENGTH), primary_key=True)
    payee_id = Column(
        String(ID_LENGTH), ForeignKey("payees.id", ondelete="CASCADE"), nullable=False
    )
    category_id = Column(
        String(ID_LENGTH), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True
    )
    amount = Column(DecimalText, nullable=True)
    currency = Column(String(3), nullable=True)
    description_template = Column(String(500), nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    frequency = Column(String(16), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    payee = relationship("Payee", back_populates="rules")


class Transaction(Base):
    """Transaction header model; money lives in its entries."""

    __tablename__ = "transactions"

    id = Column(String(ID_LENGTH), primary_key=True)
    type = Column(String(16), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(String, nullable=True)
    payee_id = Column(String(ID_LENGTH), ForeignKey("payees.id"), nullable=True)
    category_id = Column(String(ID_LENGTH), ForeignKey("categories.id"), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    entries = relationship(
        "Entry",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="Entry.id",
        lazy="selectin",
    )


class Entry(Base):
    """Signed posting of one transaction against one account."""

    __tablename__ = "entries"

    id = Column(String(ID_LENGTH + 8), primary_key=True)
    transaction_id = Column(
        String(ID_LENGTH), ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False
    )
    account_id = Column(
        String(ID_LENGTH), ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    amount = Column(DecimalText, nullable=False)
    currency = Column(String(3), nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="entries")
    account = relationship("Account", back_populates="entries")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for(database_url: str) -> Engine:
    """Create an engine; SQLite connections enforce foreign keys."""
    engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine_for(database_url)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
