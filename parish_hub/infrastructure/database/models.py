"""SQLAlchemy ORM models for branches, transfer requests and financial transactions"""

import uuid

from sqlalchemy import JSON, BigInteger, Boolean, Column, Date, DateTime, ForeignKey, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Branch(Base):
    """Organizational sub-unit (campus, parish) scoping members and finances"""

    __tablename__ = "branch"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    organisation_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False)
    address = Column(Text, nullable=True)
    city = Column(Text, nullable=True)
    state = Column(Text, nullable=True)
    country = Column(Text, nullable=True)
    phone_number = Column(Text, nullable=True)
    email = Column(Text, nullable=True)
    website = Column(Text, nullable=True)
    established_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())

    outgoing_transfers = relationship(
        "MemberTransferRequest",
        foreign_keys="MemberTransferRequest.source_branch_id",
        back_populates="source_branch",
    )
    incoming_transfers = relationship(
        "MemberTransferRequest",
        foreign_keys="MemberTransferRequest.destination_branch_id",
        back_populates="destination_branch",
    )


class MemberTransferRequest(Base):
    """Workflow record moving a member from one branch to another"""

    __tablename__ = "member_transfer_request"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    member_id = Column(Text, nullable=False, index=True)
    member_name = Column(Text, nullable=False)
    source_branch_id = Column(UUID(as_uuid=True), ForeignKey("branch.id", ondelete="CASCADE"), nullable=False)
    destination_branch_id = Column(UUID(as_uuid=True), ForeignKey("branch.id", ondelete="CASCADE"), nullable=False)
    status = Column(Text, nullable=False, default="pending")
    reason = Column(Text, nullable=False)
    transfer_data = Column(JSON, nullable=False)  # list of PERSONAL | SACRAMENTS | MINISTRIES | DONATION_HISTORY
    request_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    approved_date = Column(DateTime(timezone=True), nullable=True)
    rejected_date = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    completed_date = Column(DateTime(timezone=True), nullable=True)

    source_branch = relationship("Branch", foreign_keys=[source_branch_id], back_populates="outgoing_transfers")
    destination_branch = relationship(
        "Branch", foreign_keys=[destination_branch_id], back_populates="incoming_transfers"
    )


class FinancialTransaction(Base):
    """Income, expense or inter-branch transfer of funds"""

    __tablename__ = "financial_transaction"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    type = Column(Text, nullable=False)  # INCOME | EXPENSE | TRANSFER
    amount_cents = Column(BigInteger, nullable=False)
    branch_id = Column(UUID(as_uuid=True), ForeignKey("branch.id", ondelete="SET NULL"), nullable=True, index=True)
    fund_id = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    payment_method = Column(Text, nullable=False)
    member_id = Column(Text, nullable=True)
    vendor_id = Column(Text, nullable=True)
    transfer_source_branch_id = Column(UUID(as_uuid=True), nullable=True)
    transfer_destination_branch_id = Column(UUID(as_uuid=True), nullable=True)
    transaction_date = Column(Date, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
