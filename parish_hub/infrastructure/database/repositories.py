"""Data access layer for branches, transfer requests and transactions"""

import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from parish_hub.domain.enums import TransactionType, TransferDataType, TransferStatus
from parish_hub.domain.models import TransactionDraft
from parish_hub.domain.transfers import DEFAULT_REJECTION_REASON, check_transition
from parish_hub.infrastructure.database.models import Branch, FinancialTransaction, MemberTransferRequest


class BranchRepository:
    """Repository for branches"""

    def __init__(self, db: Session):
        self.db = db

    def create_branch(self, **fields: Any) -> Branch:
        """Persist a new branch"""
        db_branch = Branch(**fields)
        self.db.add(db_branch)
        self.db.flush()  # Get ID without committing
        return db_branch

    def get_branch_by_id(self, branch_id: uuid.UUID) -> Optional[Branch]:
        return self.db.query(Branch).filter(Branch.id == branch_id).first()

    def list_branches(
        self,
        organisation_id: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[Branch]:
        """Fetch branches ordered by name"""
        query = self.db.query(Branch)
        if organisation_id:
            query = query.filter(Branch.organisation_id == organisation_id)
        if is_active is not None:
            query = query.filter(Branch.is_active == is_active)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Branch.name.ilike(pattern), Branch.city.ilike(pattern)))
        return query.order_by(Branch.name).all()

    def update_branch(self, db_branch: Branch, changes: Dict[str, Any]) -> Branch:
        """Apply partial update"""
        for key, value in changes.items():
            setattr(db_branch, key, value)
        self.db.flush()
        return db_branch


class TransferRepository:
    """Repository for member transfer requests"""

    def __init__(self, db: Session):
        self.db = db

    def create_transfer(
        self,
        member_id: str,
        member_name: str,
        source_branch_id: uuid.UUID,
        destination_branch_id: uuid.UUID,
        reason: str,
        transfer_data: List[TransferDataType],
    ) -> MemberTransferRequest:
        db_transfer = MemberTransferRequest(
            member_id=member_id,
            member_name=member_name,
            source_branch_id=source_branch_id,
            destination_branch_id=destination_branch_id,
            status=TransferStatus.PENDING.value,
            reason=reason.strip(),
            transfer_data=[t.value for t in transfer_data],
            request_date=datetime.now(timezone.utc),
        )
        self.db.add(db_transfer)
        self.db.flush()
        return db_transfer

    def get_transfer_by_id(self, transfer_id: uuid.UUID) -> Optional[MemberTransferRequest]:
        return self.db.query(MemberTransferRequest).filter(MemberTransferRequest.id == transfer_id).first()

    def list_for_branch(
        self,
        branch_id: uuid.UUID,
        direction: str = "incoming",
        status: Optional[TransferStatus] = None,
    ) -> List[MemberTransferRequest]:
        """Incoming requests target the branch, outgoing ones originate from it"""
        query = self.db.query(MemberTransferRequest)
        if direction == "incoming":
            query = query.filter(MemberTransferRequest.destination_branch_id == branch_id)
        else:
            query = query.filter(MemberTransferRequest.source_branch_id == branch_id)
        if status is not None:
            query = query.filter(MemberTransferRequest.status == status.value)
        return query.order_by(MemberTransferRequest.request_date.desc()).all()

    def apply_transition(
        self,
        db_transfer: MemberTransferRequest,
        target: TransferStatus,
        rejection_reason: Optional[str] = None,
    ) -> MemberTransferRequest:
        """
        Move a request to its next status and stamp the matching date.

        Raises:
            ConflictError: transition not allowed from the current status
        """
        check_transition(TransferStatus(db_transfer.status), target)
        now = datetime.now(timezone.utc)

        if target == TransferStatus.APPROVED:
            db_transfer.approved_date = now
        elif target == TransferStatus.REJECTED:
            db_transfer.rejected_date = now
            db_transfer.rejection_reason = rejection_reason or DEFAULT_REJECTION_REASON
        elif target == TransferStatus.COMPLETED:
            db_transfer.completed_date = now

        db_transfer.status = target.value
        self.db.flush()
        return db_transfer

    def delete_transfer(self, db_transfer: MemberTransferRequest) -> None:
        self.db.delete(db_transfer)
        self.db.flush()


class TransactionRepository:
    """Repository for financial transactions"""

    def __init__(self, db: Session):
        self.db = db

    def create_transaction(self, draft: TransactionDraft) -> FinancialTransaction:
        """Persist a validated draft"""
        db_txn = FinancialTransaction(
            type=draft.type.value,
            amount_cents=draft.amount_cents,
            branch_id=uuid.UUID(draft.branch_id) if draft.branch_id else None,
            fund_id=draft.fund_id,
            category=draft.category,
            payment_method=draft.payment_method,
            member_id=draft.member_id,
            vendor_id=draft.vendor_id,
            transfer_source_branch_id=(
                uuid.UUID(draft.transfer_source_branch_id) if draft.transfer_source_branch_id else None
            ),
            transfer_destination_branch_id=(
                uuid.UUID(draft.transfer_destination_branch_id) if draft.transfer_destination_branch_id else None
            ),
            transaction_date=draft.transaction_date,
            notes=draft.notes,
        )
        self.db.add(db_txn)
        self.db.flush()
        return db_txn

    def list_transactions(
        self,
        branch_id: Optional[uuid.UUID] = None,
        type: Optional[TransactionType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[FinancialTransaction]:
        """Fetch transactions, newest first; transfers match either side of a branch"""
        query = self.db.query(FinancialTransaction)
        if branch_id:
            query = query.filter(
                or_(
                    FinancialTransaction.branch_id == branch_id,
                    FinancialTransaction.transfer_source_branch_id == branch_id,
                    FinancialTransaction.transfer_destination_branch_id == branch_id,
                )
            )
        if type is not None:
            query = query.filter(FinancialTransaction.type == type.value)
        if start_date:
            query = query.filter(FinancialTransaction.transaction_date >= start_date)
        if end_date:
            query = query.filter(FinancialTransaction.transaction_date <= end_date)
        return query.order_by(
            FinancialTransaction.transaction_date.desc(), FinancialTransaction.created_at.desc()
        ).all()
