"""
Calendar (iCalendar) and spreadsheet (CSV) exports of a RosterTable.

Both formats are derived purely from the table; nothing here touches the
network or the store.
"""

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Iterator, List, NamedTuple, Optional

import pandas as pd

from .models import RosterTable


CSV_HEADERS = ['date', 'task', 'staff']
ICS_PRODID = "-//Team Roster//Roster Export//EN"
ICS_LINE_LIMIT = 75  # octets, excluding CRLF


@dataclass(frozen=True)
class CalendarEvent:
    """An all-day event for one shift assignment."""

    uid: str
    date: date
    title: str
    task: str
    staff: str

    @property
    def end_date(self) -> date:
        """Exclusive end date of the all-day event."""
        return self.date + timedelta(days=1)


class CalendarEvents:
    """
    Lazy, restartable sequence of calendar events for a roster.

    Every iteration walks the table again, so the same object can be
    exported more than once.
    """

    def __init__(self, table: RosterTable):
        self.table = table

    def __iter__(self) -> Iterator[CalendarEvent]:
        for assignment in self.table:
            yield CalendarEvent(
                uid=f"{assignment.date.strftime('%Y%m%d')}-{assignment.task_id}-{assignment.staff_id}@roster",
                date=assignment.date,
                title=f"{assignment.task}: {assignment.staff}",
                task=assignment.task,
                staff=assignment.staff
            )

    def __len__(self) -> int:
        return len(self.table)


def to_calendar_events(table: RosterTable) -> CalendarEvents:
    return CalendarEvents(table)


def _ics_escape(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\r\n", "\\n")
        .replace("\n", "\\n")
    )


def _ics_fold(line: str) -> List[str]:
    """Split a content line into chunks of at most 75 octets."""
    chunks: List[str] = []
    current = ""
    size = 0
    limit = ICS_LINE_LIMIT
    for ch in line:
        width = len(ch.encode("utf-8"))
        if size + width > limit:
            chunks.append(current)
            # continuation lines start with a space, which counts toward the limit
            current = " "
            size = 1
        current += ch
        size += width
    chunks.append(current)
    return chunks


def to_ics(events: Iterable[CalendarEvent], stamp: Optional[datetime] = None) -> str:
    """
    Render events as an iCalendar document.

    Args:
        events: Events to include, typically ``to_calendar_events(table)``
        stamp: DTSTAMP for every event, timezone-aware (default: now, UTC)

    Returns:
        iCalendar text with CRLF line endings
    """
    stamp = stamp or datetime.now(timezone.utc)
    if stamp.tzinfo is None:
        raise ValueError("stamp must be timezone-aware")
    stamp = stamp.astimezone(timezone.utc)
    stamp_label = stamp.strftime("%Y%m%dT%H%M%SZ")

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{ICS_PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]
    for event in events:
        lines.extend([
            "BEGIN:VEVENT",
            f"UID:{event.uid}",
            f"DTSTAMP:{stamp_label}",
            f"DTSTART;VALUE=DATE:{event.date.strftime('%Y%m%d')}",
            f"DTEND;VALUE=DATE:{event.end_date.strftime('%Y%m%d')}",
            f"SUMMARY:{_ics_escape(event.title)}",
            f"DESCRIPTION:{_ics_escape(f'Task: {event.task}, Staff: {event.staff}')}",
            "TRANSP:TRANSPARENT",
            "END:VEVENT",
        ])
    lines.append("END:VCALENDAR")

    folded: List[str] = []
    for line in lines:
        folded.extend(_ics_fold(line))
    return "\r\n".join(folded) + "\r\n"


class Row(NamedTuple):
    date: str
    task: str
    staff: str


def to_rows(table: RosterTable) -> List[Row]:
    """Rows ordered by date, then by the task order of the configuration."""
    return [Row(a.date.isoformat(), a.task, a.staff) for a in table]


def to_csv(rows: Iterable[Row]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for row in rows:
        writer.writerow([row.date, row.task, row.staff])
    return buffer.getvalue()


def parse_csv(text: str) -> List[Row]:
    """
    Read rows back from ``to_csv`` output.

    Raises:
        ValueError: if the header is not ``date,task,staff`` or a row is short
    """
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header is None or [h.strip().lower() for h in header] != CSV_HEADERS:
        raise ValueError(f"Expected CSV header {CSV_HEADERS}, got {header}")

    rows: List[Row] = []
    for line_number, record in enumerate(reader, start=2):
        if not record:
            continue
        if len(record) != len(CSV_HEADERS):
            raise ValueError(f"Line {line_number}: expected 3 columns, got {len(record)}")
        rows.append(Row(*record))
    return rows


def rows_to_dataframe(rows: Iterable[Row]) -> pd.DataFrame:
    """Convert rows to pandas DataFrame."""
    return pd.DataFrame(list(rows), columns=CSV_HEADERS)
