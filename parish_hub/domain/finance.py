"""Financial transaction validation and period summaries"""

from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List

from parish_hub.domain.enums import TransactionType
from parish_hub.domain.exceptions import InvalidRequestError
from parish_hub.domain.models import FinancialSummary, Period, TransactionDraft

MAX_TRANSACTION_CENTS = 99_999_999_999  # 999,999,999.99

CATEGORIES: Dict[TransactionType, List[str]] = {
    TransactionType.INCOME: ["Tithe", "Offering", "Donation", "Fundraiser"],
    TransactionType.EXPENSE: ["Utilities", "Supplies", "Maintenance", "Payroll", "Missions"],
    TransactionType.TRANSFER: ["Branch Transfer", "Fund Transfer"],
}

PAYMENT_METHODS = ["Cash", "Bank Transfer", "Cheque", "Mobile Money"]


def validate_transaction(draft: TransactionDraft, today: date | None = None) -> None:
    """
    Validate a transaction the way the new-transaction form does.

    All failing fields are collected and raised together so the client can
    annotate every input at once.

    Raises:
        InvalidRequestError: with field_errors mapping field name → message
    """
    today = today or datetime.now(timezone.utc).date()
    errors: Dict[str, str] = {}

    if draft.amount_cents is None or draft.amount_cents <= 0:
        errors["amount_cents"] = "Please enter a valid amount."
    elif draft.amount_cents > MAX_TRANSACTION_CENTS:
        errors["amount_cents"] = "Amount cannot exceed 999,999,999.99"

    if draft.transaction_date is None:
        errors["transaction_date"] = "Date is required."
    elif draft.transaction_date > today:
        errors["transaction_date"] = "Date cannot be in the future."

    if not draft.branch_id and draft.type != TransactionType.TRANSFER:
        errors["branch_id"] = "Branch is required."
    if not draft.fund_id:
        errors["fund_id"] = "Fund is required."

    if not draft.category:
        errors["category"] = "Category is required."
    elif draft.category not in CATEGORIES[draft.type]:
        errors["category"] = f"Category must be one of: {', '.join(CATEGORIES[draft.type])}."

    if not draft.payment_method:
        errors["payment_method"] = "Payment method is required."
    elif draft.payment_method not in PAYMENT_METHODS:
        errors["payment_method"] = f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}."

    if draft.type == TransactionType.INCOME and not draft.member_id:
        errors["member_id"] = "Donor is required."
    if draft.type == TransactionType.EXPENSE and not draft.vendor_id:
        errors["vendor_id"] = "Vendor is required."
    if draft.type == TransactionType.TRANSFER:
        if not draft.transfer_source_branch_id:
            errors["transfer_source_branch_id"] = "Source branch is required."
        if not draft.transfer_destination_branch_id:
            errors["transfer_destination_branch_id"] = "Destination branch is required."
        if (
            draft.transfer_source_branch_id
            and draft.transfer_source_branch_id == draft.transfer_destination_branch_id
        ):
            errors["transfer_destination_branch_id"] = "Source and destination cannot be the same."

    if errors:
        raise InvalidRequestError("Transaction is invalid", errors)


def summarize_transactions(transactions: Iterable, period: Period) -> FinancialSummary:
    """
    Aggregate stored transactions that fall inside the period.

    Net is income minus expense; transfers move money between branches and
    are reported separately.
    """
    start, end = period.start.date(), period.end.date()
    totals = {t: 0 for t in TransactionType}
    by_category: Dict[str, int] = defaultdict(int)
    count = 0

    for txn in transactions:
        if not start <= txn.transaction_date <= end:
            continue
        kind = TransactionType(txn.type)
        totals[kind] += txn.amount_cents
        by_category[txn.category] += txn.amount_cents
        count += 1

    return FinancialSummary(
        period=period,
        income_cents=totals[TransactionType.INCOME],
        expense_cents=totals[TransactionType.EXPENSE],
        transfer_cents=totals[TransactionType.TRANSFER],
        net_cents=totals[TransactionType.INCOME] - totals[TransactionType.EXPENSE],
        transaction_count=count,
        by_category=dict(by_category),
    )
