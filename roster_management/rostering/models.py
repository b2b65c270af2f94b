"""
Data models for roster generation.
"""

import re
import unicodedata
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Set

import numpy as np
import pandas as pd

from ..exceptions import InvalidConfiguration


ASSIGNMENT_COLUMNS = ['date', 'task', 'staff', 'task_id', 'staff_id']


def slugify(value: str) -> str:
    """Derive an identifier from a display name ("Ying Xian" -> "ying-xian")."""
    s = unicodedata.normalize("NFKD", value or "")
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = re.sub(r"[^a-z0-9]+", "-", s.lower())
    return s.strip("-")


@dataclass(frozen=True)
class StaffMember:
    """A member of the rotation. ``staff_id`` is the identity, ``name`` is for display."""

    staff_id: str
    name: str

    def to_dict(self) -> Dict:
        return {'id': self.staff_id, 'name': self.name}


@dataclass(frozen=True)
class TaskLine:
    """A recurring task that needs one staff member per covered day."""

    task_id: str
    name: str
    weekend_coverage: bool = False

    def to_dict(self) -> Dict:
        return {
            'id': self.task_id,
            'name': self.name,
            'weekend_coverage': self.weekend_coverage
        }


@dataclass
class RosterConfig:
    """
    Input to the roster generator.

    Staff order is the rotation order; task order is the order tasks are
    filled each day and the order they appear in exports.
    """

    staff: List[StaffMember]
    tasks: List[TaskLine]
    start_date: date
    weeks: int

    def __post_init__(self):
        if not self.staff:
            raise InvalidConfiguration('staff', "Staff list must not be empty")
        if not self.tasks:
            raise InvalidConfiguration('tasks', "Task list must not be empty")
        _check_unique([s.staff_id for s in self.staff], 'staff')
        _check_unique([t.task_id for t in self.tasks], 'tasks')
        if isinstance(self.start_date, datetime) or not isinstance(self.start_date, date):
            raise InvalidConfiguration('startDate', "Start date must be a calendar date")
        if isinstance(self.weeks, bool) or not isinstance(self.weeks, int) or self.weeks < 1:
            raise InvalidConfiguration('weeks', "Weeks must be a positive integer")

    @property
    def total_days(self) -> int:
        return self.weeks * 7

    @classmethod
    def from_dict(cls, data: Mapping) -> 'RosterConfig':
        """
        Build a config from the ``{staff, tasks, startDate, weeks}`` structure.

        Staff and task entries may be plain names or mappings with ``name``
        and an optional ``id`` (tasks may also set ``weekend_coverage``).
        Missing ids are derived from names and de-duplicated. Fields other
        than the four recognised ones are ignored.

        Raises:
            InvalidConfiguration: naming the offending field
        """
        if not isinstance(data, Mapping):
            raise InvalidConfiguration('config', "Configuration must be a mapping")

        staff_entries = _parse_entries(data.get('staff'), 'staff')
        task_entries = _parse_entries(data.get('tasks'), 'tasks')
        staff_ids = _assign_ids(staff_entries, 'staff')
        task_ids = _assign_ids(task_entries, 'tasks')

        staff = [
            StaffMember(staff_id=sid, name=entry['name'])
            for sid, entry in zip(staff_ids, staff_entries)
        ]
        tasks = [
            TaskLine(task_id=tid, name=entry['name'], weekend_coverage=entry['weekend_coverage'])
            for tid, entry in zip(task_ids, task_entries)
        ]

        raw_start = data.get('startDate', data.get('start_date'))
        return cls(
            staff=staff,
            tasks=tasks,
            start_date=_parse_start_date(raw_start),
            weeks=_parse_weeks(data.get('weeks'))
        )

    def to_dict(self) -> Dict:
        return {
            'staff': [s.to_dict() for s in self.staff],
            'tasks': [t.to_dict() for t in self.tasks],
            'startDate': self.start_date.isoformat(),
            'weeks': self.weeks
        }


def _parse_entries(raw: Any, field_name: str) -> List[Dict[str, Any]]:
    if raw is None:
        raise InvalidConfiguration(field_name, f"'{field_name}' is required")
    if isinstance(raw, (str, bytes)) or not isinstance(raw, (list, tuple)):
        raise InvalidConfiguration(field_name, f"'{field_name}' must be a list of names")
    if not raw:
        raise InvalidConfiguration(field_name, f"'{field_name}' must not be empty")

    entries = []
    for item in raw:
        if isinstance(item, str):
            name, explicit_id, weekend = item, None, False
        elif isinstance(item, Mapping):
            name = item.get('name')
            explicit_id = item.get('id')
            weekend = item.get('weekend_coverage', False)
        else:
            raise InvalidConfiguration(field_name, f"Unsupported entry in '{field_name}': {item!r}")

        if not isinstance(name, str) or not name.strip():
            raise InvalidConfiguration(field_name, f"Names in '{field_name}' must not be blank")
        if explicit_id is not None and (not isinstance(explicit_id, str) or not explicit_id.strip()):
            raise InvalidConfiguration(field_name, f"Ids in '{field_name}' must be non-empty strings")
        if not isinstance(weekend, bool):
            raise InvalidConfiguration(field_name, "'weekend_coverage' must be true or false")

        entries.append({
            'name': name.strip(),
            'id': explicit_id.strip() if explicit_id else None,
            'weekend_coverage': weekend
        })
    return entries


def _assign_ids(entries: List[Dict[str, Any]], field_name: str) -> List[str]:
    explicit = [e['id'] for e in entries if e['id']]
    _check_unique(explicit, field_name)

    used: Set[str] = set(explicit)
    fallback = 'staff' if field_name == 'staff' else 'task'
    ids = []
    for entry in entries:
        if entry['id']:
            ids.append(entry['id'])
            continue
        base = slugify(entry['name']) or fallback
        candidate = base
        suffix = 2
        while candidate in used:
            candidate = f"{base}-{suffix}"
            suffix += 1
        used.add(candidate)
        ids.append(candidate)
    return ids


def _check_unique(ids: List[str], field_name: str) -> None:
    seen: Set[str] = set()
    for identifier in ids:
        if identifier in seen:
            raise InvalidConfiguration(field_name, f"Duplicate id '{identifier}' in '{field_name}'")
        seen.add(identifier)


def _parse_start_date(raw: Any) -> date:
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidConfiguration('startDate', "Start date is required (YYYY-MM-DD)")
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise InvalidConfiguration('startDate', f"Invalid start date '{raw}'. Use YYYY-MM-DD") from exc


def _parse_weeks(raw: Any) -> int:
    if isinstance(raw, bool):
        raise InvalidConfiguration('weeks', "Weeks must be a positive integer")
    if isinstance(raw, str) and raw.strip().isdigit():
        raw = int(raw.strip())
    if not isinstance(raw, int) or raw < 1:
        raise InvalidConfiguration('weeks', "Weeks must be a positive integer")
    return raw


@dataclass(frozen=True)
class ShiftAssignment:
    """One task covered by one staff member on one date."""

    date: date
    task: str
    staff: str
    task_id: str
    staff_id: str

    def to_dict(self) -> Dict:
        return {
            'date': self.date.isoformat(),
            'task': self.task,
            'staff': self.staff,
            'task_id': self.task_id,
            'staff_id': self.staff_id
        }

    def to_snapshot_entry(self) -> Dict:
        return {
            'task': self.task,
            'staff': self.staff,
            'task_id': self.task_id,
            'staff_id': self.staff_id
        }

    @classmethod
    def from_snapshot_entry(cls, day: date, entry: Mapping) -> 'ShiftAssignment':
        task = entry['task']
        staff = entry['staff']
        return cls(
            date=day,
            task=task,
            staff=staff,
            task_id=entry.get('task_id') or slugify(task),
            staff_id=entry.get('staff_id') or slugify(staff)
        )


@dataclass
class RosterTable:
    """
    Day-by-day assignments keyed by ISO date.

    Each day's list is in task order. The table is replaced as a whole on
    every generation; it is never patched in place.
    """

    days: Dict[str, List[ShiftAssignment]] = field(default_factory=dict)

    def __iter__(self) -> Iterator[ShiftAssignment]:
        for day in self.dates():
            yield from self.days[day]

    def __len__(self) -> int:
        return sum(len(assignments) for assignments in self.days.values())

    def dates(self) -> List[str]:
        return sorted(self.days)

    def assignments_on(self, day) -> List[ShiftAssignment]:
        """Assignments for a date (``date`` or ISO string); empty if none."""
        key = day.isoformat() if isinstance(day, date) else str(day)
        return list(self.days.get(key, []))

    def staff_names(self) -> Dict[str, str]:
        """Map staff id to display name."""
        return {a.staff_id: a.staff for a in self}

    def workload_balance(self) -> Dict[str, int]:
        """Number of assignments per staff id."""
        balance: Dict[str, int] = {}
        for assignment in self:
            balance[assignment.staff_id] = balance.get(assignment.staff_id, 0) + 1
        return balance

    def summary_stats(self) -> Dict[str, Any]:
        workload = np.array(list(self.workload_balance().values()), dtype=float)
        return {
            'total_assignments': len(self),
            'covered_days': sum(1 for assignments in self.days.values() if assignments),
            'staff_count': int(workload.size),
            'mean_per_staff': float(workload.mean()) if workload.size else 0.0,
            'std_per_staff': float(workload.std()) if workload.size else 0.0,
            'spread': int(workload.max() - workload.min()) if workload.size else 0
        }

    def to_dict(self) -> Dict[str, List[Dict]]:
        """Snapshot document: ``{"YYYY-MM-DD": [{task, staff, task_id, staff_id}, ...]}``."""
        return {
            day: [a.to_snapshot_entry() for a in self.days[day]]
            for day in self.dates()
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> 'RosterTable':
        days: Dict[str, List[ShiftAssignment]] = {}
        for key in sorted(data):
            day = date.fromisoformat(key)
            days[day.isoformat()] = [
                ShiftAssignment.from_snapshot_entry(day, entry) for entry in data[key]
            ]
        return cls(days=days)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert assignments to pandas DataFrame."""
        return pd.DataFrame([a.to_dict() for a in self], columns=ASSIGNMENT_COLUMNS)

    def get_summary_report(self) -> str:
        """Generate a text summary report."""
        stats = self.summary_stats()
        names = self.staff_names()
        dates = self.dates()

        report = []
        report.append("=== ROSTER SUMMARY ===")
        if dates:
            report.append(f"Period: {dates[0]} to {dates[-1]}")
        report.append(f"Total assignments: {stats['total_assignments']}")
        report.append(f"Covered days: {stats['covered_days']}")
        report.append("")
        report.append("WORKLOAD BALANCE:")
        for staff_id, count in self.workload_balance().items():
            report.append(f"  {names[staff_id]}: {count} shifts")
        report.append(f"  spread (max - min): {stats['spread']}")
        return "\n".join(report)


@dataclass
class RotationCursor:
    """Per-task pointer into the staff rotation."""

    cursor: int = 0

    def advance_to(self, new_cursor: int) -> None:
        self.cursor = new_cursor
