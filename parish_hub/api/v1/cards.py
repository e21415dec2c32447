"""Member card endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from parish_hub.api.dependencies import get_attendance_service
from parish_hub.api.v1.schemas import CardSchema, RegisterCardRequest, UpdateCardStatusRequest
from parish_hub.services.attendance_service import AttendanceService

router = APIRouter()


@router.get("/cards", response_model=List[CardSchema])
def list_cards(
    member_id: Optional[str] = Query(None),
    service: AttendanceService = Depends(get_attendance_service),
):
    return [CardSchema.model_validate(c) for c in service.list_cards(member_id)]


@router.post("/cards", response_model=CardSchema, status_code=201)
def register_card(
    request_body: RegisterCardRequest,
    service: AttendanceService = Depends(get_attendance_service),
):
    """
    Issue a card to a member.

    The member's previous active card is deactivated. A card number held by
    another active card is rejected with 409.
    """
    card = service.register_new_card(
        request_body.member_id,
        request_body.card_number.strip(),
        card_type=request_body.card_type,
        assigned_by=request_body.assigned_by,
        notes=request_body.notes,
    )
    return CardSchema.model_validate(card)


@router.patch("/cards/{card_id}/status", response_model=CardSchema)
def update_card_status(
    card_id: str,
    request_body: UpdateCardStatusRequest,
    service: AttendanceService = Depends(get_attendance_service),
):
    return CardSchema.model_validate(service.update_card_status(card_id, request_body.status))
