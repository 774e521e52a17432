import re
from pathlib import Path

_UNSAFE_NAME_RE = re.compile(r"[^a-z0-9-]")


def unique_path(path: Path) -> Path:
    """Return a path that does not exist yet, adding a -n suffix when needed."""
    if not path.exists():
        return path

    stem = path.stem
    suffix = path.suffix
    parent = path.parent
    counter = 1
    while True:
        candidate = parent / f"{stem}-{counter}{suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


def safe_project_name(*parts: str) -> str:
    """Join parts with '-' and keep only lowercase letters, digits and dashes."""
    joined = "-".join(part for part in parts if part)
    return _UNSAFE_NAME_RE.sub("-", joined.lower())
