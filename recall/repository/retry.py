from __future__ import annotations

import logging
import re
import sqlite3
from sqlite3 import Connection
from typing import Callable, TypeVar

from ..domain.ids import IdGenerator, MIN_ID_LENGTH, default_id_generator
from ..domain.models import HasIdentifier
from ..errors import IdentifierExhausted

logger = logging.getLogger(__name__)

MAX_INSERT_ATTEMPTS = 3

# sqlite reports "UNIQUE constraint failed: <table>.id" for a primary key clash
_ID_CLASH = re.compile(r"UNIQUE constraint failed: \w+\.id$")

T = TypeVar("T", bound=HasIdentifier)


def is_id_collision(err: sqlite3.IntegrityError) -> bool:
    return bool(_ID_CLASH.search(str(err)))


def insert_with_retry(
    conn: Connection,
    entity: T,
    insert: Callable[[Connection, T], None],
    id_gen: IdGenerator | None = None,
    attempts: int = MAX_INSERT_ATTEMPTS,
) -> str:
    """
    Insert ``entity`` with a short generated id, redrawing the id when it
    clashes with an existing row. Any other failure propagates at once.
    Raises IdentifierExhausted once every attempt has clashed.
    """
    gen = id_gen or default_id_generator()
    if not entity.id or len(entity.id) < MIN_ID_LENGTH:
        entity.id = gen.generate()
    for attempt in range(1, attempts + 1):
        try:
            insert(conn, entity)
            return entity.id
        except sqlite3.IntegrityError as e:
            if not is_id_collision(e):
                raise
            logger.warning("id collision on attempt %d/%d: %s", attempt, attempts, e)
            if attempt < attempts:
                entity.id = gen.generate()
    entity.id = None
    logger.error("gave up after %d id collisions (%s)", attempts, type(entity).__name__)
    raise IdentifierExhausted(f"Failed to insert after {attempts} attempts due to repeated id collisions")
