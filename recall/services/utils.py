from __future__ import annotations

# recall/services/utils.py
import time
from sqlite3 import Row
from typing import Any


def now_ts() -> int:
    return int(time.time())


def row_to_dict(row: Row | None) -> dict[str, Any] | None:
    return None if row is None else dict(row)
