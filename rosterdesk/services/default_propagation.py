"""Freezing of past rosters before a staff default rule changes."""
from datetime import datetime
from typing import List, NamedTuple, Optional
from sqlalchemy import or_, and_
from sqlalchemy.orm import Session
import uuid
import logging

from rosterdesk.models.roster import Roster, RosterEntry
from rosterdesk.services.roster_matrix import days_in_month, default_shift_for_day


logger = logging.getLogger(__name__)


class DefaultRule(NamedTuple):
    """A staff member's rule for days without an explicit entry."""
    default_shift: Optional[str]
    weekly_off_day: Optional[int]


class DefaultChangePropagator:
    """Materializes default-only days of past rosters with the old rule.

    Days without an entry are rendered from the staff member's current rule,
    so before that rule changes every past month gets explicit entries for
    those days. Current and future months keep following the live rule.

    The propagator only flushes; the caller owns the transaction.
    """

    def __init__(self, db: Session):
        """
        Initialize propagator.

        Args:
            db: Database session
        """
        self.db = db

    def past_rosters(self, project_id: str, now: datetime) -> List[Roster]:
        """Rosters of a project strictly before the month of ``now``."""
        return self.db.query(Roster).filter(
            Roster.project_id == project_id,
            or_(
                Roster.year < now.year,
                and_(Roster.year == now.year, Roster.month < now.month)
            )
        ).order_by(Roster.year.asc(), Roster.month.asc()).all()

    def propagate(
        self,
        staff_id: str,
        project_id: str,
        old_rule: DefaultRule,
        new_rule: DefaultRule,
        now: Optional[datetime] = None
    ) -> int:
        """
        Freeze past rosters for one staff member.

        Args:
            staff_id: Staff whose rule changes
            project_id: Project owning the staff member
            old_rule: Rule in effect before the change
            new_rule: Rule about to take effect
            now: Current time (defaults to now)

        Returns:
            Number of entries created
        """
        if old_rule == new_rule:
            return 0

        if now is None:
            now = datetime.now()

        created = 0
        for roster in self.past_rosters(project_id, now):
            existing_days = {
                day for (day,) in self.db.query(RosterEntry.day).filter(
                    RosterEntry.roster_id == roster.id,
                    RosterEntry.staff_id == staff_id
                ).all()
            }

            new_entries = [
                RosterEntry(
                    id=str(uuid.uuid4()),
                    roster_id=roster.id,
                    staff_id=staff_id,
                    day=day,
                    shift_code=default_shift_for_day(
                        roster.year,
                        roster.month,
                        day,
                        old_rule.default_shift,
                        old_rule.weekly_off_day
                    )
                )
                for day in range(1, days_in_month(roster.year, roster.month) + 1)
                if day not in existing_days
            ]

            if new_entries:
                self.db.add_all(new_entries)
                created += len(new_entries)
                logger.info(
                    f"Froze {len(new_entries)} days of roster {roster.id} "
                    f"({roster.year}-{roster.month}) for staff {staff_id}"
                )

        self.db.flush()
        return created
