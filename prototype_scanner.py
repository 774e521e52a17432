#!/usr/bin/env python3
"""
Prototype scanner - turns the prototypes folder into a category -> items tree.

Layout rules (one level of nesting):

    prototypes/
        checkout/index.html              -> item "checkout", category "checkout"
        onboarding/welcome/index.html    -> item "welcome", category "onboarding"
        onboarding/tutorial/index.html   -> item "tutorial", category "onboarding"

Deeper folders are not inspected and categories without items are dropped.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

import config as cfg
from utils.html_tools import read_html_title

_TITLE_PREFIX_RE = re.compile(r"^.*?\s[-–—]\s+")
_PROTOTYPE_WORD_RE = re.compile(r"\bprototype\b", re.IGNORECASE)
_MOCKUP_RE = re.compile(r"\bMockup (\d+)")
_AI_WORD_RE = re.compile(r"\bAi\b")


@dataclass(frozen=True)
class Item:
    slug: str
    name: str
    category: str
    path: Path
    entry_file: Path
    description: str
    deploy_config: Optional[Path] = None

    @property
    def key(self) -> str:
        return f"{self.category}/{self.slug}"


@dataclass(frozen=True)
class Category:
    name: str
    items: Tuple[Item, ...]


DirEntry = Union[Item, Category]
Tree = Dict[str, List[Item]]


def format_name(slug: str) -> str:
    """'ai-mockup-2' -> 'AI Mockup #2'."""
    words = re.sub(r"[-_]+", " ", slug).split()
    name = " ".join(word[:1].upper() + word[1:] for word in words)
    name = _MOCKUP_RE.sub(r"Mockup #\1", name)
    return _AI_WORD_RE.sub("AI", name)


def clean_title(title: str) -> str:
    """Drop a 'Project - ' prefix and the word 'Prototype' from a page title."""
    text = " ".join(title.split())
    text = _TITLE_PREFIX_RE.sub("", text, count=1)
    text = _PROTOTYPE_WORD_RE.sub("", text)
    return " ".join(text.split()).strip(" -–—:|")


def extract_description(entry_file: Path) -> str:
    """Short description from the entry file's <title>, or the default one."""
    try:
        title = read_html_title(entry_file)
    except (OSError, UnicodeError):
        return cfg.DEFAULT_DESCRIPTION
    if not title:
        return cfg.DEFAULT_DESCRIPTION
    return clean_title(title) or cfg.DEFAULT_DESCRIPTION


def _is_excluded(name: str) -> bool:
    return name in cfg.EXCLUDE_DIRS or name.startswith(".")


def _child_dirs(directory: Path) -> List[Path]:
    return sorted(
        (entry for entry in directory.iterdir() if entry.is_dir() and not _is_excluded(entry.name)),
        key=lambda p: p.name,
    )


def _build_item(directory: Path, category: str) -> Item:
    entry_file = directory / cfg.ENTRY_FILE
    entry_file.stat()
    deploy_config = directory / cfg.DEPLOY_CONFIG_FILE
    return Item(
        slug=directory.name,
        name=format_name(directory.name),
        category=category,
        path=directory,
        entry_file=entry_file,
        description=extract_description(entry_file),
        deploy_config=deploy_config if deploy_config.is_file() else None,
    )


def classify_dir(directory: Path, category: Optional[str] = None) -> Optional[DirEntry]:
    """Classify a folder as a single Item or as a Category of items.

    A folder that directly holds the entry file is an Item; its category is
    `category` or, for top-level folders, the folder's own name. Otherwise its
    child folders holding the entry file become the items of a Category.
    Returns None when neither applies.
    """
    if (directory / cfg.ENTRY_FILE).is_file():
        return _build_item(directory, category or directory.name)

    if category is not None:
        return None

    items: List[Item] = []
    for child in _child_dirs(directory):
        try:
            entry = classify_dir(child, directory.name)
        except OSError as exc:
            print(f"⚠️  Skipping {child.name}: {exc}")
            continue
        if isinstance(entry, Item):
            items.append(entry)

    if not items:
        return None
    return Category(name=directory.name, items=tuple(items))


def scan(root: Path) -> Tree:
    """Scan the prototypes root; returns categories in folder order."""
    tree: Tree = {}
    try:
        children = _child_dirs(Path(root))
    except OSError as exc:
        print(f"❌ Failed to scan prototypes: {exc}")
        return tree

    for child in children:
        try:
            entry = classify_dir(child)
        except OSError as exc:
            print(f"⚠️  Skipping {child.name}: {exc}")
            continue

        if isinstance(entry, Item):
            tree.setdefault(entry.category, []).append(entry)
        elif isinstance(entry, Category):
            tree.setdefault(entry.name, []).extend(entry.items)

    return tree


def iter_items(tree: Tree) -> Iterator[Item]:
    for items in tree.values():
        yield from items


def count_items(tree: Tree) -> int:
    return sum(len(items) for items in tree.values())


def find_item(tree: Tree, name: str) -> Optional[Item]:
    """Look up an item by slug or by 'category/slug'."""
    wanted = name.strip().strip("/")
    for item in iter_items(tree):
        if wanted in (item.slug, item.key):
            return item
    return None
