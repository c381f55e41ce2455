"""Row to todoTask payload translation.

Due dates are calendar dates pinned to 23:59:00 in the configured time
zone. They are emitted either as local wall time with the zone name
("local") or as the equivalent UTC instant ("utc"). Reminders are always
emitted as whole-second UTC instants.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Literal
from zoneinfo import ZoneInfo

from todo_sync.exceptions import (
    InvalidDueDate,
    InvalidRecurrenceDate,
    InvalidReminderDate,
)
from todo_sync.rows.base import TaskRow

DueEncoding = Literal["local", "utc"]

DEFAULT_STATUS = "notStarted"
DUE_TIME = time(23, 59, 0)

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d")
_DATETIME_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M")


def parse_date(value: Any, tz: ZoneInfo) -> date:
    """Parse a cell value as a calendar date in tz.

    Aware datetimes and offset strings are converted to tz before the date
    is taken.

    Raises:
        ValueError: If the value is not a recognizable date.
    """
    if isinstance(value, datetime):
        return value.astimezone(tz).date() if value.tzinfo else value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"not a date: {value!r}")

    text = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return parse_datetime(text, tz).astimezone(tz).date()


def parse_datetime(value: Any, tz: ZoneInfo) -> datetime:
    """Parse a cell value as an aware datetime; naive values are taken in tz.

    Raises:
        ValueError: If the value is not a recognizable datetime.
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=tz)
    if isinstance(value, date):
        return datetime.combine(value, time(0, 0), tzinfo=tz)
    if not isinstance(value, str):
        raise ValueError(f"not a datetime: {value!r}")

    text = value.strip().replace("/", "-")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        for fmt in _DATETIME_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
        else:
            raise ValueError(f"not a datetime: {value!r}") from None

    return parsed if parsed.tzinfo else parsed.replace(tzinfo=tz)


def format_utc(moment: datetime) -> str:
    """ISO-8601 UTC instant with whole-second precision."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_interval(value: Any) -> int:
    """Recurrence interval as an integer, 1 when not numeric."""
    text = str(value if value is not None else "").strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        return 1


class PayloadBuilder:
    """Build todoTask payloads for a configured time zone.

    Example:
        >>> builder = PayloadBuilder("Asia/Tokyo", due_encoding="local")
        >>> builder.build(TaskRow(0, {"title": "Pay rent", "due": "2025-08-17"}))
        {'title': 'Pay rent', 'status': 'notStarted',
         'dueDateTime': {'dateTime': '2025-08-17T23:59:00', 'timeZone': 'Asia/Tokyo'}}
    """

    def __init__(self, time_zone: str = "UTC", due_encoding: DueEncoding = "local"):
        self.time_zone = time_zone
        self.tz = ZoneInfo(time_zone)
        self.due_encoding = due_encoding

    def build(self, row: TaskRow) -> dict[str, Any]:
        """Translate one row. Pure; raises on invalid dates.

        Raises:
            InvalidDueDate: If `due` cannot be parsed.
            InvalidReminderDate: If `reminder` cannot be parsed.
            InvalidRecurrenceDate: If the recurrence start or end cannot be parsed.
        """
        payload: dict[str, Any] = {
            "title": row.text("title"),
            "status": row.text("status") or DEFAULT_STATUS,
        }

        body = row.text("body")
        if body:
            payload["body"] = {"content": body, "contentType": "text"}

        if row.text("due"):
            payload["dueDateTime"] = self._due(row.get("due"))

        if row.text("reminder"):
            payload["reminderDateTime"] = self._reminder(row.get("reminder"))
            payload["isReminderOn"] = True

        if row.text("recurrence_type") and row.text("recurrence_start"):
            payload["recurrence"] = self._recurrence(row)

        return payload

    def _due(self, value: Any) -> dict[str, str]:
        try:
            due_date = parse_date(value, self.tz)
        except ValueError as e:
            raise InvalidDueDate(value) from e

        local_due = datetime.combine(due_date, DUE_TIME, tzinfo=self.tz)
        if self.due_encoding == "utc":
            return {"dateTime": format_utc(local_due), "timeZone": "UTC"}
        return {"dateTime": local_due.strftime("%Y-%m-%dT%H:%M:%S"), "timeZone": self.time_zone}

    def _reminder(self, value: Any) -> dict[str, str]:
        try:
            moment = parse_datetime(value, self.tz)
        except ValueError as e:
            raise InvalidReminderDate(value) from e
        return {"dateTime": format_utc(moment), "timeZone": "UTC"}

    def _recurrence_date(self, value: Any) -> str:
        try:
            return parse_date(value, self.tz).strftime("%Y-%m-%d")
        except ValueError as e:
            raise InvalidRecurrenceDate(value) from e

    def _recurrence(self, row: TaskRow) -> dict[str, Any]:
        pattern = {
            "type": row.text("recurrence_type").lower(),
            "interval": parse_interval(row.get("recurrence_interval")),
        }

        range_: dict[str, str] = {
            "type": "noEnd",
            "startDate": self._recurrence_date(row.get("recurrence_start")),
        }
        if row.text("recurrence_end"):
            range_["type"] = "endDate"
            range_["endDate"] = self._recurrence_date(row.get("recurrence_end"))

        return {"pattern": pattern, "range": range_}


def build_payload(
    row: TaskRow, time_zone: str = "UTC", due_encoding: DueEncoding = "local"
) -> dict[str, Any]:
    """Build a todoTask payload for one row."""
    return PayloadBuilder(time_zone, due_encoding).build(row)
