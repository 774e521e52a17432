from __future__ import annotations

import json
import shutil
from datetime import datetime
from pathlib import Path

import config as cfg
from path_utils import safe_project_name, unique_path
from utils.html_tools import prototype_template
from utils.site_paths import validate_segment


def iter_html_files(directory: Path):
    """HTML files ('.html' or '.htm') directly inside a directory, sorted."""
    return sorted(
        p for p in Path(directory).iterdir()
        if p.is_file() and p.suffix.lower() in (".html", ".htm")
    )


def create_prototype(root: Path, category: str, name: str) -> Path:
    """Create <root>/<category>/<name>/ with a starter page and hosting config."""
    category = validate_segment(category)
    name = validate_segment(name)
    proto_dir = root / category / name
    if proto_dir.exists():
        raise FileExistsError(f"Prototype already exists: {proto_dir}")

    proto_dir.mkdir(parents=True)
    (proto_dir / cfg.ENTRY_FILE).write_text(prototype_template("Prototype"), encoding="utf-8")
    deploy_config = {
        "name": safe_project_name("proto", category, name),
        "public": True,
        "builds": [],
        "routes": [],
    }
    (proto_dir / cfg.DEPLOY_CONFIG_FILE).write_text(json.dumps(deploy_config, indent=2) + "\n", encoding="utf-8")
    return proto_dir


def copy_quick_prototype(html_file: Path, root: Path, now: datetime | None = None) -> Path:
    """Copy a loose HTML file to <root>/quick-<timestamp>/index.html."""
    source = Path(html_file)
    if not source.is_file():
        raise FileNotFoundError(f"HTML file not found: {source}")

    stamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
    proto_dir = unique_path(root / f"quick-{stamp}")
    proto_dir.mkdir(parents=True)
    shutil.copyfile(source, proto_dir / cfg.ENTRY_FILE)
    return proto_dir
