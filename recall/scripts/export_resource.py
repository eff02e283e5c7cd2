"""
Write a resource's stored file to disk.

The destination is chosen by the caller (e.g. a save dialog); when it is
a directory the resource name is used, with the MIME subtype as
extension if the name has none.

Usage:
  python -m recall.scripts.export_resource --token <session token> --id <resource id> --out ~/Downloads
"""
from __future__ import annotations

import argparse
import os
import sys

from recall.errors import RecallError
from recall.services.identity_svc import resolve_token
from recall.services.resource_svc import read_resource_file, suggested_extension


def safe_filename(name: str, fallback: str) -> str:
    """Single path component derived from a resource name."""
    for sep in (os.sep, os.altsep, "/", "\\"):
        if sep:
            name = name.replace(sep, "_")
    name = name.strip().lstrip(".").strip()
    return name or fallback


def target_path(out: str, name: str, file_type: str | None, fallback: str = "resource") -> str:
    if not os.path.isdir(out):
        return out
    filename = safe_filename(name, fallback)
    ext = suggested_extension(file_type)
    if ext and not os.path.splitext(filename)[1]:
        filename = f"{filename}.{ext}"
    return os.path.join(out, filename)


def export_resource(token: str, resource_id: str, out: str) -> str:
    user_id = resolve_token(token)
    name, file_type, data = read_resource_file(user_id, resource_id)
    path = target_path(out, name, file_type, fallback=resource_id)
    with open(path, "wb") as f:
        f.write(data)
    return path


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--token", required=True)
    ap.add_argument("--id", required=True, dest="resource_id")
    ap.add_argument("--out", required=True)
    args = ap.parse_args()

    try:
        path = export_resource(args.token, args.resource_id, os.path.expanduser(args.out))
    except RecallError as e:
        print({"success": False, "message": e.message}, file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        print({"success": False, "message": f"cannot write file: {e}"}, file=sys.stderr)
        sys.exit(1)
    print({"success": True, "path": path})


if __name__ == "__main__":
    main()
