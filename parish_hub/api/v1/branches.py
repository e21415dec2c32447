"""Branch administration endpoints"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from parish_hub.api.dependencies import parse_uuid
from parish_hub.api.v1.schemas import (
    BranchSchema,
    CreateBranchRequest,
    PageResponse,
    TransferSchema,
    UpdateBranchRequest,
    page_response,
)
from parish_hub.config import settings
from parish_hub.domain.enums import TransferStatus
from parish_hub.domain.listing import paginate
from parish_hub.infrastructure.database.repositories import BranchRepository, TransferRepository
from parish_hub.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/branches", response_model=List[BranchSchema])
def list_branches(
    organisation_id: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    q: Optional[str] = Query(None, description="Search by name or city"),
    db: Session = Depends(get_db),
):
    branches = BranchRepository(db).list_branches(organisation_id, is_active, q)
    return [BranchSchema.model_validate(b) for b in branches]


@router.post("/branches", response_model=BranchSchema, status_code=201)
def create_branch(request_body: CreateBranchRequest, db: Session = Depends(get_db)):
    db_branch = BranchRepository(db).create_branch(**request_body.model_dump())
    db.commit()
    db.refresh(db_branch)
    return BranchSchema.model_validate(db_branch)


@router.get("/branches/{branch_id}", response_model=BranchSchema)
def get_branch(branch_id: str, db: Session = Depends(get_db)):
    db_branch = BranchRepository(db).get_branch_by_id(parse_uuid(branch_id, "branch"))
    if not db_branch:
        raise HTTPException(status_code=404, detail="Branch not found")
    return BranchSchema.model_validate(db_branch)


@router.patch("/branches/{branch_id}", response_model=BranchSchema)
def update_branch(branch_id: str, request_body: UpdateBranchRequest, db: Session = Depends(get_db)):
    """Partially update a branch; only fields present in the body change"""
    branch_repo = BranchRepository(db)
    db_branch = branch_repo.get_branch_by_id(parse_uuid(branch_id, "branch"))
    if not db_branch:
        raise HTTPException(status_code=404, detail="Branch not found")

    branch_repo.update_branch(db_branch, request_body.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(db_branch)
    return BranchSchema.model_validate(db_branch)


@router.get("/branches/{branch_id}/transfers", response_model=PageResponse[TransferSchema])
def list_branch_transfers(
    branch_id: str,
    direction: Literal["incoming", "outgoing"] = Query("incoming"),
    status: Optional[TransferStatus] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Transfer requests for a branch, newest first.

    Incoming requests name the branch as destination, outgoing ones as source.
    """
    branch_uuid = parse_uuid(branch_id, "branch")
    if not BranchRepository(db).get_branch_by_id(branch_uuid):
        raise HTTPException(status_code=404, detail="Branch not found")

    transfers = TransferRepository(db).list_for_branch(branch_uuid, direction, status)
    return page_response(paginate(transfers, page, page_size), TransferSchema)
