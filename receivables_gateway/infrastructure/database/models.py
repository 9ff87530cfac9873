"""SQLAlchemy ORM models for debts, installments and the payment log"""

import uuid
from sqlalchemy import Column, String, BigInteger, DateTime, Date, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class DebtRow(Base):
    """Debt owed to a user by one debtor"""

    __tablename__ = "debt"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    scheme = Column(String(40), nullable=False)
    principal_cents = Column(BigInteger, nullable=False)
    cumulative_paid_cents = Column(BigInteger, nullable=False, default=0)
    recurring_amount_cents = Column(BigInteger, nullable=True)
    recurring_day_of_month = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    installments = relationship(
        "InstallmentRow",
        back_populates="debt",
        cascade="all, delete-orphan",
        order_by="InstallmentRow.sequence_number",
    )
    payments = relationship("PaymentRow", back_populates="debt", cascade="all, delete-orphan")


class InstallmentRow(Base):
    """One scheduled installment of a fixed-schedule debt"""

    __tablename__ = "installment"
    __table_args__ = (UniqueConstraint("debt_id", "sequence_number", name="uq_installment_sequence"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    debt_id = Column(UUID(as_uuid=True), ForeignKey("debt.id", ondelete="CASCADE"), nullable=False, index=True)
    sequence_number = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=False)
    amount_due_cents = Column(BigInteger, nullable=False)
    amount_paid_cents = Column(BigInteger, nullable=False, default=0)
    status = Column(Text, nullable=False, default="pending")  # Cache only, rederived on read
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    debt = relationship("DebtRow", back_populates="installments")


class PaymentRow(Base):
    """Append-only payment log entry"""

    __tablename__ = "payment_record"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    debt_id = Column(UUID(as_uuid=True), ForeignKey("debt.id", ondelete="CASCADE"), nullable=False, index=True)
    owner_id = Column(Text, nullable=False, index=True)
    paid_at = Column(DateTime(timezone=True), nullable=False)
    amount_cents = Column(BigInteger, nullable=False)
    method = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    installment_id = Column(UUID(as_uuid=True), ForeignKey("installment.id", ondelete="SET NULL"), nullable=True)
    recurring_sequence = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    debt = relationship("DebtRow", back_populates="payments")
