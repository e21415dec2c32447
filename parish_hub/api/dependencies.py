"""Dependency injection for FastAPI endpoints"""

import uuid

from fastapi import Depends, HTTPException, Request

from parish_hub.config import settings
from parish_hub.infrastructure.clients.notifications import NotificationClient
from parish_hub.infrastructure.demo.seed import build_demo_store
from parish_hub.infrastructure.demo.store import InMemoryStore
from parish_hub.services.attendance_service import AttendanceService

_store: InMemoryStore | None = None


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_store() -> InMemoryStore:
    """Provide the process-wide demo store, seeding it on first use"""
    global _store
    if _store is None:
        _store = build_demo_store() if settings.seed_demo_data else InMemoryStore()
    return _store


def get_attendance_service(store: InMemoryStore = Depends(get_store)) -> AttendanceService:
    """Provide attendance service bound to the demo store"""
    return AttendanceService(store)


def get_notification_client() -> NotificationClient:
    """Provide notification webhook client instance"""
    return NotificationClient()


def parse_uuid(value: str, label: str) -> uuid.UUID:
    """Parse a path identifier, rejecting malformed values with 400"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")
