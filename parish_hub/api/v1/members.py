"""GET /v1/members - Member directory with search and pagination"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from parish_hub.api.dependencies import get_attendance_service
from parish_hub.api.v1.schemas import MemberSchema, PageResponse, page_response
from parish_hub.config import settings
from parish_hub.domain.enums import MemberStatus
from parish_hub.domain.listing import paginate, search, sort_items
from parish_hub.services.attendance_service import AttendanceService

router = APIRouter()

SEARCH_FIELDS = ("first_name", "last_name", "email")


@router.get("/members", response_model=PageResponse[MemberSchema])
def list_members(
    branch_id: Optional[str] = Query(None, description="Primary branch filter"),
    status: Optional[MemberStatus] = Query(None),
    q: Optional[str] = Query(None, description="Search first/last name or email"),
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=100),
    service: AttendanceService = Depends(get_attendance_service),
):
    """List members alphabetically by last name"""
    members = service.list_members(branch_id)
    if status is not None:
        members = [m for m in members if m.status == status]
    members = sort_items(search(members, q, SEARCH_FIELDS), "last_name")
    return page_response(paginate(members, page, page_size), MemberSchema)


@router.get("/members/{member_id}", response_model=MemberSchema)
def get_member(member_id: str, service: AttendanceService = Depends(get_attendance_service)):
    return MemberSchema.model_validate(service.get_member(member_id))
