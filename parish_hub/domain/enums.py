"""Enumerations shared by the domain, persistence and API layers"""

from enum import Enum


class MemberStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    VISITOR = "visitor"


class CardStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    LOST = "lost"


class CardType(str, Enum):
    RFID = "rfid"
    NFC = "nfc"
    QR = "qr"


class DeviceStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    MAINTENANCE = "maintenance"


class DeviceType(str, Enum):
    WALL_MOUNTED = "wall-mounted"
    KIOSK = "kiosk"
    MOBILE = "mobile"
    ADMIN = "admin"


class CheckInMethod(str, Enum):
    CARD_SCAN = "card_scan"
    MANUAL_ENTRY = "manual_entry"
    MOBILE_APP = "mobile_app"
    QR_CODE = "qr_code"


class AttendanceStatus(str, Enum):
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    PENDING = "pending"


class EventStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TransferStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class TransferDataType(str, Enum):
    PERSONAL = "PERSONAL"
    SACRAMENTS = "SACRAMENTS"
    MINISTRIES = "MINISTRIES"
    DONATION_HISTORY = "DONATION_HISTORY"


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class Timeframe(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
