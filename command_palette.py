"""Search behaviour of the gallery's command palette.

The gallery page embeds a small script with the same rules; this module is
the reference the script is kept in line with:

- only entries with a URL are searchable;
- a blank query lists every searchable entry;
- otherwise name, description, category and slug are matched as
  case-insensitive substrings, keeping gallery order;
- the highlighted row is clamped to the result list.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

CLOSED = "closed"
OPEN_EMPTY = "open-empty"
OPEN_FILTERED = "open-filtered"

SEARCH_FIELDS = ("name", "description", "category", "slug")


def _is_searchable(entry: Mapping[str, object]) -> bool:
    url = entry.get("url")
    return isinstance(url, str) and url not in ("", "#")


def filter_entries(entries: Sequence[Mapping[str, object]], query: str) -> List[Mapping[str, object]]:
    published = [entry for entry in entries if _is_searchable(entry)]
    needle = (query or "").strip().lower()
    if not needle:
        return published
    return [
        entry
        for entry in published
        if any(needle in str(entry.get(field) or "").lower() for field in SEARCH_FIELDS)
    ]


class PaletteState:
    """Open/type/move/select/close transitions of the palette."""

    def __init__(self, entries: Sequence[Mapping[str, object]]):
        self.entries = list(entries)
        self.state = CLOSED
        self.query = ""
        self.results: List[Mapping[str, object]] = []
        self.selected = 0

    @property
    def is_open(self) -> bool:
        return self.state != CLOSED

    def open(self) -> None:
        self.state = OPEN_EMPTY
        self.query = ""
        self.selected = 0
        self.results = filter_entries(self.entries, "")

    def type(self, query: str) -> None:
        if not self.is_open:
            return
        self.query = query
        self.state = OPEN_FILTERED if query.strip() else OPEN_EMPTY
        self.results = filter_entries(self.entries, query)
        self.selected = 0

    def move(self, delta: int) -> None:
        if not self.is_open or not self.results:
            return
        self.selected = max(0, min(self.selected + delta, len(self.results) - 1))

    def select(self) -> Optional[str]:
        """URL of the highlighted result, or None when there is nothing to open."""
        if not self.is_open or not self.results:
            return None
        url = self.results[self.selected].get("url")
        return url if isinstance(url, str) else None

    def close(self) -> None:
        self.state = CLOSED
        self.selected = 0
