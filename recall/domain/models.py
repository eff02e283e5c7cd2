"""Persisted entity records.

Each record carries an ``id`` that stays ``None`` until the row is
inserted; ``insert_with_retry`` assigns it. Timestamps are Unix seconds.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Protocol


class HasIdentifier(Protocol):
    id: str | None


PROJECT_STATUSES = ("Inbox", "Planned", "Progress", "Done")
PROJECT_PRIORITIES = ("High", "Medium", "Low")


@dataclass
class User:
    email: str
    name: str
    password_hash: str
    created_at: int
    updated_at: int
    id: str | None = None

    def summary(self) -> dict[str, Any]:
        return {"id": self.id, "email": self.email, "name": self.name}


@dataclass
class Session:
    user_id: str
    token: str
    expires_at: int
    created_at: int
    id: str | None = None


@dataclass
class Area:
    user_id: str
    name: str
    created_at: int
    updated_at: int
    image_url: str | None = None
    id: str | None = None


@dataclass
class Project:
    user_id: str
    area_id: str
    title: str
    status: str
    created_at: int
    updated_at: int
    description: str | None = None
    priority: str | None = None
    start_date: int | None = None
    end_date: int | None = None
    id: str | None = None


@dataclass
class Resource:
    user_id: str
    project_id: str
    name: str
    created_at: int
    updated_at: int
    content: str | None = None
    file_data: str | None = None
    file_type: str | None = None
    file_size: int | None = None
    id: str | None = None


@dataclass
class Event:
    user_id: str
    title: str
    start_time: int
    created_at: int
    updated_at: int
    project_id: str | None = None
    description: str | None = None
    end_time: int | None = None
    location: str | None = None
    all_day: bool = False
    id: str | None = None


def to_row(entity: Any) -> dict[str, Any]:
    """Column mapping for INSERT; booleans become 0/1."""
    row = asdict(entity)
    for k, v in row.items():
        if isinstance(v, bool):
            row[k] = int(v)
    return row
