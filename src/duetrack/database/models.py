"""SQLAlchemy models for duetrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class PaymentRecord(Base):
    """One payment occurrence.

    ``position`` keeps the snapshot order so that a load after a save returns
    payments in the order they were saved.
    """

    __tablename__ = "payments"

    id = Column(String, primary_key=True)
    position = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    payment_type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    paid_amount = Column(Numeric(12, 2), nullable=False, default=0)
    is_paid = Column(Boolean, nullable=False, default=False)
    date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    period = Column(String, nullable=False, default="MONTHLY")
    minimum_payment_amount = Column(Numeric(12, 2), nullable=True)
    custom_tag = Column(String, nullable=True)
    commitment_end_date = Column(Date, nullable=True)
    auto_payment = Column(Boolean, nullable=False, default=False)
    auto_payment_bank = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    saved_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
