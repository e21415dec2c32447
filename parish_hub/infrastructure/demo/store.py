"""In-memory demo store standing in for the attendance backend"""

import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from parish_hub.domain.models import (
    AttendanceEvent,
    AttendanceRecord,
    CardDevice,
    Member,
    MemberCard,
)


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


@dataclass
class InMemoryStore:
    """
    Shared collections mutated in place by the attendance service.

    Single-process demo scaffolding: there is no locking or atomicity.
    """

    members: List[Member] = field(default_factory=list)
    cards: List[MemberCard] = field(default_factory=list)
    devices: List[CardDevice] = field(default_factory=list)
    events: List[AttendanceEvent] = field(default_factory=list)
    records: List[AttendanceRecord] = field(default_factory=list)

    def member(self, member_id: str) -> Optional[Member]:
        return next((m for m in self.members if m.id == member_id), None)

    def card(self, card_id: str) -> Optional[MemberCard]:
        return next((c for c in self.cards if c.id == card_id), None)

    def device(self, device_id: str) -> Optional[CardDevice]:
        return next((d for d in self.devices if d.id == device_id), None)

    def event(self, event_id: str) -> Optional[AttendanceEvent]:
        return next((e for e in self.events if e.id == event_id), None)

    def record(self, record_id: str) -> Optional[AttendanceRecord]:
        return next((r for r in self.records if r.id == record_id), None)

    def members_by_id(self) -> Dict[str, Member]:
        return {m.id: m for m in self.members}
