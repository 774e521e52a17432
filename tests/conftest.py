import os
import sys
from pathlib import Path

import pytest

# Ensure the repo root is on sys.path for absolute imports.
REPO_ROOT = Path(__file__).resolve().parents[1]
repo_root_str = str(REPO_ROOT)
if repo_root_str not in sys.path:
    sys.path.insert(0, repo_root_str)

from publisher import PublishError  # noqa: E402


def make_prototype(root: Path, *parts: str, title: str = "Prototype", mtime: float | None = None) -> Path:
    """Create root/<parts...>/index.html and return the prototype folder."""
    folder = root.joinpath(*parts)
    folder.mkdir(parents=True, exist_ok=True)
    entry = folder / "index.html"
    entry.write_text(f"<html><head><title>{title}</title></head><body></body></html>", encoding="utf-8")
    if mtime is not None:
        os.utime(entry, (mtime, mtime))
    return folder


class FakePublisher:
    """Records publish calls; names listed in `failures` raise PublishError."""

    def __init__(self, failures=(), url_template="https://{name}.vercel.app"):
        self.failures = set(failures)
        self.url_template = url_template
        self.calls = []

    def publish(self, source_dir, name):
        self.calls.append((Path(source_dir), name))
        if name in self.failures:
            raise PublishError("deploy exploded")
        return self.url_template.format(name=name)

    def check_environment(self):
        return "Vercel CLI 99.0.0", "tester"


@pytest.fixture
def prototypes_root(tmp_path):
    root = tmp_path / "prototypes"
    root.mkdir()
    return root
