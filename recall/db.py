from __future__ import annotations

# recall/db.py
import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from typing import Any, Iterator

import yaml
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.pool import QueuePool

from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

# DB path resolution order:
# 1) RECALL_DB_PATH environment variable
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path
# 4) fallback: recall.db at the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "recall.db")

DEFAULT_POOL_SIZE = 5
DEFAULT_POOL_TIMEOUT = 10.0
DEFAULT_BCRYPT_ROUNDS = 12

_pools: dict[str, QueuePool] = {}
_pools_lock = threading.Lock()


def _read_config_yaml() -> dict:
    cfg_path = os.environ.get("RECALL_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    out: dict[str, Any] = {}
    for k in ("db_path", "test_db_path"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    for k in ("pool_size", "pool_timeout", "bcrypt_rounds"):
        if cfg.get(k) is not None:
            out[k] = cfg[k]
    return out


def get_settings() -> dict:
    """Pool and hashing settings; environment wins over config.yaml."""
    cfg = _read_config_yaml()
    return {
        "pool_size": int(os.environ.get("RECALL_POOL_SIZE") or cfg.get("pool_size") or DEFAULT_POOL_SIZE),
        "pool_timeout": float(os.environ.get("RECALL_POOL_TIMEOUT") or cfg.get("pool_timeout") or DEFAULT_POOL_TIMEOUT),
        "bcrypt_rounds": int(os.environ.get("RECALL_BCRYPT_ROUNDS") or cfg.get("bcrypt_rounds") or DEFAULT_BCRYPT_ROUNDS),
    }


def get_db_path() -> str:
    env_path = os.environ.get("RECALL_DB_PATH")
    cfg = _read_config_yaml()
    cfg_db = cfg.get("db_path")
    cfg_test = cfg.get("test_db_path")
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg_test:
        path = cfg_test
    elif cfg_db:
        path = cfg_db if os.path.isabs(cfg_db) else os.path.join(_PROJECT_ROOT, cfg_db)
    else:
        path = _ROOT_DB

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


def _connect(path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(
        path,
        check_same_thread=False,
        isolation_level=None,
    )
    conn.execute("PRAGMA foreign_keys = ON;")
    conn.row_factory = sqlite3.Row
    return conn


def get_pool(db_path: str | None = None) -> QueuePool:
    """Process-wide bounded pool for one database file."""
    path = db_path or get_db_path()
    with _pools_lock:
        pool = _pools.get(path)
        if pool is None:
            settings = get_settings()
            pool = QueuePool(
                lambda: _connect(path),
                pool_size=settings["pool_size"],
                max_overflow=0,
                timeout=settings["pool_timeout"],
            )
            _pools[path] = pool
        return pool


def dispose_pools() -> None:
    with _pools_lock:
        for pool in _pools.values():
            pool.dispose()
        _pools.clear()


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Check out a pooled SQLite connection for the duration of one command.
    Statements autocommit; foreign_keys is on and rows are sqlite3.Row.
    Pool exhaustion and I/O failures surface as StoreUnavailable.
    """
    pool = get_pool(db_path)
    try:
        conn = pool.connect()
    except PoolTimeoutError as e:
        logger.error("connection pool exhausted: %s", e)
        raise StoreUnavailable("Database busy: no free connection") from e
    except sqlite3.Error as e:
        logger.error("cannot open database: %s", e)
        raise StoreUnavailable(str(e)) from e
    try:
        yield conn
    except sqlite3.OperationalError as e:
        logger.error("database operation failed: %s", e)
        raise StoreUnavailable(str(e)) from e
    finally:
        conn.close()


def init_db(db_path: str | None = None) -> None:
    """Create every table on first run; safe to call repeatedly."""
    from .repository import ensure_all_schemas
    from .logs import ensure_log_schema

    with get_conn(db_path) as conn:
        ensure_all_schemas(conn)
    ensure_log_schema(db_path)
