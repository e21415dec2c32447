"""Member transfer request endpoints"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from parish_hub.api.dependencies import get_notification_client, get_request_id, parse_uuid
from parish_hub.api.v1.schemas import CreateTransferRequest, TransferSchema, UpdateTransferRequest
from parish_hub.domain.enums import TransferStatus
from parish_hub.domain.transfers import validate_new_transfer
from parish_hub.infrastructure.clients.notifications import NotificationClient
from parish_hub.infrastructure.database.repositories import BranchRepository, TransferRepository
from parish_hub.infrastructure.database.session import get_db
from parish_hub.infrastructure.observability.logging import log_transfer_transition
from parish_hub.infrastructure.observability.metrics import transfer_transition_counter

router = APIRouter()

NOTIFIED_STATUSES = (TransferStatus.REJECTED, TransferStatus.COMPLETED)


@router.post("/transfers", response_model=TransferSchema, status_code=201)
def create_transfer(request_body: CreateTransferRequest, db: Session = Depends(get_db)):
    """
    Open a pending transfer request between two branches.

    Raises 422 with the first failing form rule, 404 when either branch is unknown.
    """
    transfer_data = validate_new_transfer(
        request_body.member_id,
        str(request_body.source_branch_id),
        str(request_body.destination_branch_id),
        request_body.reason,
        request_body.transfer_data,
    )

    branch_repo = BranchRepository(db)
    for branch_id in (request_body.source_branch_id, request_body.destination_branch_id):
        if not branch_repo.get_branch_by_id(branch_id):
            raise HTTPException(status_code=404, detail=f"Branch {branch_id} not found")

    db_transfer = TransferRepository(db).create_transfer(
        member_id=request_body.member_id,
        member_name=request_body.member_name,
        source_branch_id=request_body.source_branch_id,
        destination_branch_id=request_body.destination_branch_id,
        reason=request_body.reason,
        transfer_data=transfer_data,
    )
    db.commit()
    db.refresh(db_transfer)
    return TransferSchema.model_validate(db_transfer)


@router.get("/transfers/{transfer_id}", response_model=TransferSchema)
def get_transfer(transfer_id: str, db: Session = Depends(get_db)):
    db_transfer = TransferRepository(db).get_transfer_by_id(parse_uuid(transfer_id, "transfer"))
    if not db_transfer:
        raise HTTPException(status_code=404, detail="Transfer request not found")
    return TransferSchema.model_validate(db_transfer)


@router.patch("/transfers/{transfer_id}", response_model=TransferSchema)
def update_transfer_status(
    transfer_id: str,
    request_body: UpdateTransferRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    notification_client: NotificationClient = Depends(get_notification_client),
):
    """
    Approve, reject or complete a transfer request.

    Flow:
    1. Check the requested step against the current status (409 if not allowed)
    2. Stamp the matching date and persist
    3. Schedule a notification for rejected and completed requests
    """
    request_id = get_request_id(request)
    transfer_repo = TransferRepository(db)
    db_transfer = transfer_repo.get_transfer_by_id(parse_uuid(transfer_id, "transfer"))
    if not db_transfer:
        raise HTTPException(status_code=404, detail="Transfer request not found")

    previous = db_transfer.status
    transfer_repo.apply_transition(db_transfer, request_body.status, request_body.rejection_reason)
    db.commit()
    db.refresh(db_transfer)

    transfer_transition_counter.labels(status=request_body.status.value).inc()
    log_transfer_transition(request_id, str(db_transfer.id), previous, db_transfer.status)

    if request_body.status in NOTIFIED_STATUSES:
        background_tasks.add_task(
            notification_client.send_event,
            {
                "event": f"TRANSFER_{request_body.status.value.upper()}",
                "transfer_id": str(db_transfer.id),
                "member_id": db_transfer.member_id,
                "source_branch_id": str(db_transfer.source_branch_id),
                "destination_branch_id": str(db_transfer.destination_branch_id),
                "rejection_reason": db_transfer.rejection_reason,
            },
        )

    return TransferSchema.model_validate(db_transfer)


@router.delete("/transfers/{transfer_id}", status_code=204)
def delete_transfer(transfer_id: str, db: Session = Depends(get_db)):
    transfer_repo = TransferRepository(db)
    db_transfer = transfer_repo.get_transfer_by_id(parse_uuid(transfer_id, "transfer"))
    if not db_transfer:
        raise HTTPException(status_code=404, detail="Transfer request not found")

    transfer_repo.delete_transfer(db_transfer)
    db.commit()
