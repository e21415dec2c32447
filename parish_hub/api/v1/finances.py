"""Financial transaction endpoints"""

import logging
import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from parish_hub.api.dependencies import get_request_id
from parish_hub.api.v1.schemas import (
    CreateTransactionRequest,
    FinancialSummarySchema,
    PageResponse,
    TransactionSchema,
    page_response,
)
from parish_hub.config import settings
from parish_hub.domain.enums import Timeframe, TransactionType
from parish_hub.domain.finance import summarize_transactions, validate_transaction
from parish_hub.domain.listing import paginate
from parish_hub.domain.models import TransactionDraft
from parish_hub.domain.periods import compute_period
from parish_hub.infrastructure.database.repositories import TransactionRepository
from parish_hub.infrastructure.database.session import get_db
from parish_hub.infrastructure.observability.metrics import record_transaction

router = APIRouter(prefix="/finances")


def _optional_id(value: Optional[uuid.UUID]) -> Optional[str]:
    return str(value) if value else None


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
def create_transaction(
    request_body: CreateTransactionRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Record an income, expense or inter-branch transfer.

    Every failing field is reported at once under "errors" with a 422.
    """
    draft = TransactionDraft(
        type=request_body.type,
        amount_cents=request_body.amount_cents,
        transaction_date=request_body.transaction_date,
        fund_id=request_body.fund_id,
        category=request_body.category,
        payment_method=request_body.payment_method,
        branch_id=_optional_id(request_body.branch_id),
        member_id=request_body.member_id,
        vendor_id=request_body.vendor_id,
        transfer_source_branch_id=_optional_id(request_body.transfer_source_branch_id),
        transfer_destination_branch_id=_optional_id(request_body.transfer_destination_branch_id),
        notes=request_body.notes,
    )
    validate_transaction(draft)

    db_txn = TransactionRepository(db).create_transaction(draft)
    db.commit()
    db.refresh(db_txn)

    record_transaction(draft.type.value, draft.amount_cents)
    logging.info(
        "Transaction recorded",
        extra={
            "request_id": get_request_id(request),
            "transaction_id": str(db_txn.id),
            "type": draft.type.value,
            "amount_cents": draft.amount_cents,
        },
    )
    return TransactionSchema.model_validate(db_txn)


@router.get("/transactions", response_model=PageResponse[TransactionSchema])
def list_transactions(
    branch_id: Optional[uuid.UUID] = Query(None),
    type: Optional[TransactionType] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=100),
    db: Session = Depends(get_db),
):
    transactions = TransactionRepository(db).list_transactions(branch_id, type, start_date, end_date)
    return page_response(paginate(transactions, page, page_size), TransactionSchema)


@router.get("/summary", response_model=FinancialSummarySchema)
def get_financial_summary(
    timeframe: Timeframe = Query(Timeframe.MONTH),
    branch_id: Optional[uuid.UUID] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Income, expense and transfer totals for the current period.

    Returns:
        Totals in cents with net = income - expense, grouped by category
    """
    period = compute_period(timeframe)
    transactions = TransactionRepository(db).list_transactions(
        branch_id, start_date=period.start.date(), end_date=period.end.date()
    )
    return FinancialSummarySchema.model_validate(summarize_transactions(transactions, period))
