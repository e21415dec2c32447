"""Member transfer request rules"""

from typing import Dict, FrozenSet, List, Sequence

from parish_hub.domain.enums import TransferDataType, TransferStatus
from parish_hub.domain.exceptions import ConflictError, InvalidRequestError

# pending → approved → completed, pending → rejected
ALLOWED_TRANSITIONS: Dict[TransferStatus, FrozenSet[TransferStatus]] = {
    TransferStatus.PENDING: frozenset({TransferStatus.APPROVED, TransferStatus.REJECTED}),
    TransferStatus.APPROVED: frozenset({TransferStatus.COMPLETED}),
    TransferStatus.REJECTED: frozenset(),
    TransferStatus.COMPLETED: frozenset(),
}

DEFAULT_REJECTION_REASON = "Request rejected"


def validate_new_transfer(
    member_id: str | None,
    source_branch_id: str | None,
    destination_branch_id: str | None,
    reason: str | None,
    transfer_data: Sequence[TransferDataType],
) -> List[TransferDataType]:
    """
    Check a transfer request before it is stored.

    Returns:
        transfer_data with duplicates removed, order preserved

    Raises:
        InvalidRequestError: First failing rule, as the transfer form reports it
    """
    if not member_id:
        raise InvalidRequestError("Please select a member", {"member_id": "required"})
    if not destination_branch_id:
        raise InvalidRequestError(
            "Please select a destination branch", {"destination_branch_id": "required"}
        )
    if not source_branch_id:
        raise InvalidRequestError("Source branch is required", {"source_branch_id": "required"})
    if source_branch_id == destination_branch_id:
        raise InvalidRequestError(
            "Source and destination branches must differ",
            {"destination_branch_id": "must differ from source"},
        )
    if not reason or not reason.strip():
        raise InvalidRequestError(
            "Please provide a reason for the transfer", {"reason": "required"}
        )
    if not transfer_data:
        raise InvalidRequestError(
            "Please select at least one data type to transfer", {"transfer_data": "required"}
        )
    return list(dict.fromkeys(transfer_data))


def check_transition(current: TransferStatus, target: TransferStatus) -> None:
    """Raise ConflictError unless current → target is an allowed step"""
    if target not in ALLOWED_TRANSITIONS[current]:
        raise ConflictError(
            f"Cannot move transfer request from {current.value} to {target.value}"
        )
