"""SQLAlchemy models for rojmel database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    Numeric,
    String,
    UniqueConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(14, 2)


def _now() -> datetime:
    return datetime.now(UTC)


class Project(Base):
    """Project model, also holding the project's settings."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    budget = Column(MONEY, default=2500000, nullable=False)
    currency = Column(String, default="₹", nullable=False)
    date_format = Column(String, default="dd-MM-yyyy", nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    categories = relationship("Category", back_populates="project", cascade="all, delete-orphan")
    parties = relationship("Party", back_populates="project", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="project", cascade="all, delete-orphan")
    assignments = relationship("UserProject", back_populates="project", cascade="all, delete-orphan")


class Category(Base):
    """Category model with its sub-categories stored as a JSON list."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    key = Column(String, nullable=False)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    subcategories = Column(JSON, default=list, nullable=False)

    __table_args__ = (UniqueConstraint("project_id", "key", name="uq_project_category_key"),)

    # Relationships
    project = relationship("Project", back_populates="categories")


class Party(Base):
    """Counter-party model."""

    __tablename__ = "parties"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    type = Column(String, default="supplier", nullable=False)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    opening_balance = Column(MONEY, default=0, nullable=False)
    current_balance = Column(MONEY, default=0, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("project_id", "name", name="uq_project_party_name"),)

    # Relationships
    project = relationship("Project", back_populates="parties")
    transactions = relationship("Transaction", back_populates="party")


class Transaction(Base):
    """Ledger entry model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    voucher_no = Column(String, nullable=True)
    party_id = Column(Integer, ForeignKey("parties.id", ondelete="SET NULL"), nullable=True)
    description = Column(String, nullable=True)
    category = Column(String, nullable=True)
    sub_category = Column(String, nullable=True)
    type = Column(String, nullable=True)
    purchase_amount = Column(MONEY, default=0, nullable=False)
    credit = Column(MONEY, default=0, nullable=False)
    debit = Column(MONEY, default=0, nullable=False)
    payment_mode = Column(String, nullable=True)
    reference = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    has_attachment = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    project = relationship("Project", back_populates="transactions")
    party = relationship("Party", back_populates="transactions")
    attachment = relationship(
        "Attachment", back_populates="transaction", uselist=False, cascade="all, delete-orphan"
    )


class Attachment(Base):
    """Receipt image attached to a transaction."""

    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(
        Integer, ForeignKey("transactions.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    data = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="attachment")


class User(Base):
    """User model. Credentials are not stored."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=True)
    name = Column(String, nullable=False)
    role = Column(String, default="user", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    assignments = relationship("UserProject", back_populates="user", cascade="all, delete-orphan")


class UserProject(Base):
    """Assignment of a user to a project with a per-project role."""

    __tablename__ = "user_projects"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    role = Column(String, default="viewer", nullable=False)
    assigned_at = Column(DateTime, default=_now, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "project_id", name="uq_user_project"),)

    # Relationships
    user = relationship("User", back_populates="assignments")
    project = relationship("Project", back_populates="assignments")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine: Engine = create_engine(database_url, echo=False)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
