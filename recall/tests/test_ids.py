from __future__ import annotations

import random
import sqlite3

import pytest

from recall.db import get_conn
from recall.domain.ids import ID_ALPHABET, ID_LENGTH, TOKEN_LENGTH, IdGenerator, TokenGenerator
from recall.domain.models import Area, Session, User
from recall.errors import IdentifierExhausted
from recall.repository import area_repo, session_repo, user_repo
from recall.repository.retry import insert_with_retry


class ScriptedIds(IdGenerator):
    """Hands out a fixed sequence of ids."""

    def __init__(self, ids):
        super().__init__()
        self._ids = list(ids)
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        return self._ids.pop(0)


def _seed_user(conn, uid="USER0001"):
    user_repo.insert(conn, User(email=f"{uid}@example.com", name="n", password_hash="x", created_at=1, updated_at=1, id=uid))
    return uid


def _count(conn, table):
    return conn.execute(f"SELECT COUNT(1) AS c FROM {table}").fetchone()["c"]


def test_alphabet_is_31_unambiguous_symbols():
    assert len(ID_ALPHABET) == 31
    assert len(set(ID_ALPHABET)) == 31
    for confusable in "BIOSZ":
        assert confusable not in ID_ALPHABET


def test_generate_shape_and_seeded_determinism():
    a = IdGenerator(random.Random(42))
    b = IdGenerator(random.Random(42))
    ids = [a.generate() for _ in range(50)]
    assert ids == [b.generate() for _ in range(50)]
    for i in ids:
        assert len(i) == ID_LENGTH
        assert set(i) <= set(ID_ALPHABET)


def test_token_shape():
    tok = TokenGenerator(random.Random(1)).generate()
    assert len(tok) == TOKEN_LENGTH
    assert tok.isalnum()


def test_retry_succeeds_on_third_attempt_with_fresh_id(tmp_db_path):
    with get_conn() as conn:
        uid = _seed_user(conn)
        area_repo.insert(conn, Area(user_id=uid, name="a", created_at=1, updated_at=1, id="AAAAAAAA"))
        area_repo.insert(conn, Area(user_id=uid, name="c", created_at=1, updated_at=1, id="CCCCCCCC"))

        gen = ScriptedIds(["AAAAAAAA", "CCCCCCCC", "DDDDDDDD"])
        area = Area(user_id=uid, name="new", created_at=2, updated_at=2)
        new_id = insert_with_retry(conn, area, area_repo.insert, gen)

        assert new_id == "DDDDDDDD"
        assert new_id not in ("AAAAAAAA", "CCCCCCCC")
        assert gen.calls == 3
        assert area_repo.get_one(conn, new_id, uid)["name"] == "new"


def test_retry_exhausted_leaves_no_row(tmp_db_path):
    with get_conn() as conn:
        uid = _seed_user(conn)
        area_repo.insert(conn, Area(user_id=uid, name="a", created_at=1, updated_at=1, id="AAAAAAAA"))
        before = _count(conn, "areas")

        gen = ScriptedIds(["AAAAAAAA", "AAAAAAAA", "AAAAAAAA"])
        area = Area(user_id=uid, name="never", created_at=2, updated_at=2)
        with pytest.raises(IdentifierExhausted):
            insert_with_retry(conn, area, area_repo.insert, gen)

        assert area.id is None
        assert gen.calls == 3
        assert _count(conn, "areas") == before


def test_other_constraint_failures_are_not_retried(tmp_db_path):
    with get_conn() as conn:
        uid = _seed_user(conn)
        session_repo.insert(conn, Session(user_id=uid, token="same-token", expires_at=10, created_at=1, id="SESS0001"))

        gen = ScriptedIds(["SESS0002", "SESS0003", "SESS0004"])
        dup = Session(user_id=uid, token="same-token", expires_at=10, created_at=1)
        with pytest.raises(sqlite3.IntegrityError):
            insert_with_retry(conn, dup, session_repo.insert, gen)
        assert gen.calls == 1


def test_short_preset_id_is_replaced_but_valid_one_kept(tmp_db_path):
    with get_conn() as conn:
        uid = _seed_user(conn)
        short = Area(user_id=uid, name="s", created_at=1, updated_at=1, id="AB")
        assert insert_with_retry(conn, short, area_repo.insert, ScriptedIds(["KKKKKKKK"])) == "KKKKKKKK"

        kept = Area(user_id=uid, name="k", created_at=1, updated_at=1, id="PRESET01")
        gen = ScriptedIds([])
        assert insert_with_retry(conn, kept, area_repo.insert, gen) == "PRESET01"
        assert gen.calls == 0
