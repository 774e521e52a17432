from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from prototype_scanner import Item
from publish_cache import PublishRecord, parse_timestamp


def source_mtime(item: Item) -> datetime:
    """Modification time of the item's entry file, UTC, to the microsecond."""
    mtime = item.entry_file.stat().st_mtime
    return datetime.fromtimestamp(mtime, tz=timezone.utc)


def needs_publish(item: Item, record: Optional[PublishRecord]) -> bool:
    """True when the item was never published or its entry file changed since.

    Anything that prevents the comparison (missing file, unreadable cached
    timestamp) counts as a change.
    """
    if record is None:
        return True

    cached = parse_timestamp(record.last_modified)
    if cached is None:
        return True

    try:
        current = source_mtime(item)
    except OSError:
        return True

    return current > cached
