"""File-backed JSON helpers for the creature store.

Provides:
- filesystem-safe keys derived from creature names
- atomic JSON writes (temp file + rename)
- `_meta` envelopes and TTL staleness checks on `_meta.fetched_at`
"""

import json
import os
import re
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

SAFE_FILENAME_RE = re.compile(r"[^a-z0-9_-]+")


def ensure_dir(path: str) -> None:
    """Create a directory (and parents) if missing."""
    os.makedirs(path, exist_ok=True)


def safe_filename(name: str) -> str:
    """Map a creature name to a lower-cased, filesystem-safe file stem.

    PokéAPI slugs (``a-z``, ``0-9``, ``-``) pass through unchanged apart from
    case, which makes the stem a case-insensitive key.
    """
    safe = SAFE_FILENAME_RE.sub("_", name.strip().lower())
    safe = re.sub(r"_+", "_", safe).strip("_")
    return safe or "unnamed"


def list_json_files(dir_path: str) -> List[str]:
    """Return the sorted ``*.json`` paths directly under ``dir_path``."""
    if not os.path.isdir(dir_path):
        return []
    return sorted(
        os.path.join(dir_path, name)
        for name in os.listdir(dir_path)
        if name.lower().endswith(".json")
    )


def read_json(path: str) -> Optional[Dict[str, Any]]:
    """Read a JSON object from disk; return None if missing or invalid."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return None
    return data if isinstance(data, dict) else None


def atomic_write_json(path: str, obj: Dict[str, Any]) -> None:
    """Write ``obj`` to a sibling temp file, then rename it over ``path``."""
    ensure_dir(os.path.dirname(path))
    fd, tmp_path = tempfile.mkstemp(
        prefix=os.path.basename(path) + ".",
        suffix=".tmp",
        dir=os.path.dirname(path),
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(obj, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def wrap_record(payload: Dict[str, Any], **meta: Any) -> Dict[str, Any]:
    """Wrap a serialized record with a `_meta` block stamped with the write time."""
    return {
        "_meta": {"fetched_at": datetime.now(timezone.utc).isoformat(), **meta},
        "data": payload,
    }


def _parse_iso(dt_str: str) -> Optional[datetime]:
    try:
        if dt_str.endswith("Z"):
            dt_str = dt_str[:-1] + "+00:00"
        return datetime.fromisoformat(dt_str)
    except (TypeError, ValueError):
        return None


def record_is_stale(record: Optional[Dict[str, Any]], ttl_days: float) -> bool:
    """Return True when the envelope is missing, undated, or older than TTL."""
    if not record or not isinstance(record.get("_meta"), dict):
        return True
    fetched_at = record["_meta"].get("fetched_at")
    dt = _parse_iso(fetched_at) if isinstance(fetched_at, str) else None
    if not dt:
        return True
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (datetime.now(timezone.utc) - dt) > timedelta(days=ttl_days)
