"""Take-attendance selection: which members can still be marked for an event"""

from typing import Iterable, List, Set

from parish_hub.domain.exceptions import InvalidRequestError
from parish_hub.domain.models import AttendanceRecord, Member

ALREADY_MARKED_MESSAGE = "All selected members are already marked for this event"
NOTHING_SELECTED_MESSAGE = "No members selected"


class AttendanceSelection:
    """
    Selection state for marking attendance on a roster.

    Members that already have a record for the event are partitioned out and
    can never be selected; select-all and per-row toggles only touch the
    available members.
    """

    def __init__(self, members: Iterable[Member], records: Iterable[AttendanceRecord]):
        marked_ids = {r.member_id for r in records}
        self.members: List[Member] = list(members)
        self.available: List[str] = [m.id for m in self.members if m.id not in marked_ids]
        self.already_marked: List[str] = [m.id for m in self.members if m.id in marked_ids]
        self.selected: Set[str] = set()
        # Marked ids the caller tried to pick; used to explain empty submissions
        self._rejected: Set[str] = set()

    @property
    def all_selected(self) -> bool:
        return bool(self.available) and self.selected == set(self.available)

    def toggle_select_all(self) -> None:
        """Select every available member, or clear when all are already selected"""
        if not self.available:
            self._rejected.update(self.already_marked)
            return
        if self.all_selected:
            self.selected.clear()
        else:
            self.selected = set(self.available)

    def toggle(self, member_id: str) -> None:
        """Flip one row; already-marked or unknown members are ignored"""
        if member_id in self.already_marked:
            self._rejected.add(member_id)
            return
        if member_id not in self.available:
            return
        if member_id in self.selected:
            self.selected.discard(member_id)
        else:
            self.selected.add(member_id)

    def select(self, member_ids: Iterable[str]) -> None:
        for member_id in member_ids:
            if member_id not in self.selected:
                self.toggle(member_id)

    def submission(self) -> List[str]:
        """
        Member ids to mark, in roster order.

        Raises:
            InvalidRequestError: When nothing net-new is selected. The message
                distinguishes picking only already-marked members from an
                empty selection.
        """
        chosen = [member_id for member_id in self.available if member_id in self.selected]
        if chosen:
            return chosen
        if self._rejected:
            raise InvalidRequestError(ALREADY_MARKED_MESSAGE)
        raise InvalidRequestError(NOTHING_SELECTED_MESSAGE)
