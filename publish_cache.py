"""Persistent cache of published prototype URLs (deployments.json).

The file is a flat JSON object keyed by prototype slug:

    {
      "welcome": {
        "url": "https://prototype-welcome.vercel.app",
        "last_modified": "2026-10-01T09:12:00Z",
        "published_at": "2026-10-01T09:15:31Z",
        "category": "onboarding",
        "name": "Welcome"
      }
    }

A missing or malformed file loads as an empty cache. Saving rewrites the
whole file. There is no locking, so two runs at once will race on it.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator

# Keys written by the older Node tooling.
_LEGACY_KEYS = {
    "lastModified": "last_modified",
    "timestamp": "published_at",
    "feature": "category",
}


def format_timestamp(value: datetime, *, precise: bool = False) -> str:
    """UTC ISO-8601 with a Z suffix; microseconds are kept only when `precise`."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    if not precise:
        value = value.replace(microsecond=0)
    return value.isoformat().replace("+00:00", "Z")


def parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None

    iso_value = value.strip()
    if not iso_value:
        return None

    if iso_value.endswith("Z"):
        iso_value = iso_value[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(iso_value)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _utc_now_iso() -> str:
    return format_timestamp(datetime.now(timezone.utc))


@dataclass(frozen=True)
class PublishRecord:
    url: str
    last_modified: str
    published_at: str
    category: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "PublishRecord | None":
        data = dict(payload)
        for legacy, current in _LEGACY_KEYS.items():
            if legacy in data and current not in data:
                data[current] = data[legacy]

        url = data.get("url")
        if not isinstance(url, str) or not url.strip():
            return None

        def _text(key: str) -> str:
            value = data.get(key)
            return value if isinstance(value, str) else ""

        return cls(
            url=url.strip(),
            last_modified=_text("last_modified"),
            published_at=_text("published_at"),
            category=_text("category"),
            name=_text("name"),
        )

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def _read_records(path: Path) -> Dict[str, PublishRecord]:
    if not path.exists():
        return {}

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeError, ValueError):
        return {}

    if not isinstance(payload, dict):
        return {}

    records: Dict[str, PublishRecord] = {}
    for key, value in payload.items():
        if not isinstance(key, str) or not isinstance(value, dict):
            continue
        record = PublishRecord.from_dict(value)
        if record is not None:
            records[key] = record
    return records


def _write_records(path: Path, records: Dict[str, PublishRecord]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {key: record.to_dict() for key, record in records.items()}
    fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
            fh.write("\n")
        os.replace(tmp_name, path)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


class PublishCache:
    """Slug -> PublishRecord mapping backed by a JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.records: Dict[str, PublishRecord] = {}

    def load(self) -> Dict[str, PublishRecord]:
        self.records = _read_records(self.path)
        return self.records

    def save(self, records: Dict[str, PublishRecord] | None = None) -> None:
        if records is not None:
            self.records = dict(records)
        _write_records(self.path, self.records)

    def get(self, slug: str) -> PublishRecord | None:
        return self.records.get(slug)

    def set(self, slug: str, record: PublishRecord) -> None:
        self.records[slug] = record

    def record_publish(self, item, url: str, *, last_modified: datetime, now: str | None = None) -> PublishRecord:
        """Store the record for a successful publish of `item`, replacing any previous one."""
        record = PublishRecord(
            url=url,
            last_modified=format_timestamp(last_modified, precise=True),
            published_at=now or _utc_now_iso(),
            category=item.category,
            name=item.name,
        )
        self.set(item.slug, record)
        return record

    def url_for(self, slug: str) -> str | None:
        record = self.get(slug)
        return record.url if record else None

    def __contains__(self, slug: object) -> bool:
        return slug in self.records

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[str]:
        return iter(self.records)
