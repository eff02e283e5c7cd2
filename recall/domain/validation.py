"""Input rules shared by every entity store."""
from __future__ import annotations

from ..errors import EmptyField, FileTooLarge, InvalidEmail, InvalidEnum, InvalidTimeRange
from .models import PROJECT_PRIORITIES, PROJECT_STATUSES

MAX_FILE_SIZE = 5 * 1024 * 1024  # bytes


def required_text(value: str | None, field: str) -> str:
    """Trimmed value; EmptyField when nothing is left."""
    text = (value or "").strip()
    if not text:
        raise EmptyField(field)
    return text


def optional_text(value: str | None) -> str | None:
    """Trimmed value, or None when absent or blank."""
    if value is None:
        return None
    text = value.strip()
    return text or None


def check_status(status: str) -> str:
    if status not in PROJECT_STATUSES:
        raise InvalidEnum("status", PROJECT_STATUSES)
    return status


def check_priority(priority: str | None) -> str | None:
    if priority is None:
        return None
    if priority not in PROJECT_PRIORITIES:
        raise InvalidEnum("priority", PROJECT_PRIORITIES)
    return priority


def check_time_range(start_time: int, end_time: int | None) -> None:
    # equal times are rejected too
    if end_time is not None and end_time <= start_time:
        raise InvalidTimeRange()


def check_file_size(size: int | None) -> None:
    if size is not None and size > MAX_FILE_SIZE:
        raise FileTooLarge()


def check_email(email: str) -> str:
    if "@" not in email or "." not in email:
        raise InvalidEmail()
    return email
