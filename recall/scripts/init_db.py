"""
Create the Recall database and all tables if they do not exist yet.

Usage:
  python -m recall.scripts.init_db [--db path/to/recall.db]
"""
from __future__ import annotations

import argparse
import logging

from recall.db import get_db_path, init_db


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--db", help="database file (defaults to config.yaml / RECALL_DB_PATH)")
    args = ap.parse_args()
    logging.basicConfig(level=logging.INFO)

    path = args.db or get_db_path()
    init_db(path)
    print({"message": "ok", "db_path": path})


if __name__ == "__main__":
    main()
