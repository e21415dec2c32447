"""Domain-specific exceptions"""

from typing import Dict, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFoundError(DomainException):
    """Referenced member, event, card, device, branch or record does not exist"""

    pass


class ConflictError(DomainException):
    """Operation clashes with the current state (duplicate check-in, card in use, bad transition)"""

    pass


class InvalidRequestError(DomainException):
    """Input is incomplete or violates a business rule"""

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.field_errors = field_errors or {}


class NotificationError(DomainException):
    """Notification webhook is unavailable or rejected the event"""

    pass
