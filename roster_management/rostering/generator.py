"""
Roster generator.

Implements the rotation rules:
1. Working days (Mon-Fri) cover every task; other days only cover tasks
   flagged for weekend coverage
2. Each task keeps its own cursor into the staff rotation, starting at the
   task's index so tasks do not land on the same person every day
3. A person already booked that day is skipped; if everyone is booked the
   run fails with ScheduleConflict instead of double-booking
"""

import logging
from collections.abc import Mapping
from datetime import date, timedelta
from typing import AbstractSet, Dict, Iterable, List, Optional, Tuple, Union

from ..exceptions import ScheduleConflict
from .models import RosterConfig, RosterTable, RotationCursor, ShiftAssignment, StaffMember, TaskLine


logger = logging.getLogger(__name__)

# date.weekday(): Monday == 0 ... Sunday == 6
WORKING_DAYS = frozenset({0, 1, 2, 3, 4})


def next_available(staff: List[StaffMember],
                   cursor: int,
                   booked_today: AbstractSet[str]) -> Optional[Tuple[StaffMember, int]]:
    """
    Pick the next unbooked staff member at or after ``cursor``.

    Args:
        staff: Staff in rotation order
        cursor: Current rotation position for the task
        booked_today: Staff ids that already hold an assignment on the date

    Returns:
        ``(member, new_cursor)`` where ``new_cursor`` points one past the
        chosen member, or None when every member is already booked
    """
    size = len(staff)
    for attempt in range(size):
        index = (cursor + attempt) % size
        member = staff[index]
        if member.staff_id not in booked_today:
            return member, (index + 1) % size
    return None


class RosterGenerator:
    """
    Builds a RosterTable from a RosterConfig.

    The generator holds no state between calls: cursors are created fresh on
    every ``generate`` so identical configs always give identical tables.
    """

    def __init__(self, working_days: Iterable[int] = WORKING_DAYS):
        """
        Args:
            working_days: Weekday numbers (Monday == 0) on which every task is covered
        """
        self.working_days = frozenset(working_days)

    def is_working_day(self, day: date) -> bool:
        return day.weekday() in self.working_days

    def tasks_for_day(self, tasks: List[TaskLine], day: date) -> List[TaskLine]:
        """Tasks that need cover on ``day``, in config order."""
        if self.is_working_day(day):
            return list(tasks)
        return [task for task in tasks if task.weekend_coverage]

    def generate(self, config: Union[RosterConfig, Mapping]) -> RosterTable:
        """
        Generate a complete roster for the configured period.

        Args:
            config: RosterConfig, or a raw ``{staff, tasks, startDate, weeks}`` mapping

        Returns:
            RosterTable covering ``weeks * 7`` days from the start date

        Raises:
            InvalidConfiguration: if the raw mapping is malformed
            ScheduleConflict: if a task cannot be covered without double-booking
        """
        if not isinstance(config, RosterConfig):
            config = RosterConfig.from_dict(config)

        staff = config.staff
        cursors: Dict[str, RotationCursor] = {
            task.task_id: RotationCursor(cursor=index % len(staff))
            for index, task in enumerate(config.tasks)
        }

        days: Dict[str, List[ShiftAssignment]] = {}
        for offset in range(config.total_days):
            day = config.start_date + timedelta(days=offset)
            day_assignments = self._assign_day(day, config.tasks, staff, cursors)
            if day_assignments:
                days[day.isoformat()] = day_assignments

        table = RosterTable(days=days)
        logger.info(
            "Generated roster from %s for %d week(s): %d assignments over %d days",
            config.start_date.isoformat(), config.weeks, len(table), len(days)
        )
        return table

    def _assign_day(self,
                    day: date,
                    tasks: List[TaskLine],
                    staff: List[StaffMember],
                    cursors: Dict[str, RotationCursor]) -> List[ShiftAssignment]:
        booked_today = set()
        assignments = []

        for task in self.tasks_for_day(tasks, day):
            cursor = cursors[task.task_id]
            picked = next_available(staff, cursor.cursor, booked_today)
            if picked is None:
                logger.warning("Schedule conflict on %s: no free staff for %s", day.isoformat(), task.name)
                raise ScheduleConflict(day, task.name)

            member, new_cursor = picked
            expected = staff[cursor.cursor]
            if member.staff_id != expected.staff_id:
                logger.debug(
                    "%s %s: %s already booked, assigned %s",
                    day.isoformat(), task.name, expected.name, member.name
                )
            cursor.advance_to(new_cursor)
            booked_today.add(member.staff_id)
            assignments.append(ShiftAssignment(
                date=day,
                task=task.name,
                staff=member.name,
                task_id=task.task_id,
                staff_id=member.staff_id
            ))

        return assignments


def generate(config: Union[RosterConfig, Mapping]) -> RosterTable:
    """Generate a roster with the default Monday-Friday working week."""
    return RosterGenerator().generate(config)
