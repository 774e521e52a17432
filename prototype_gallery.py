#!/usr/bin/env python3
"""
Prototype gallery: publish HTML prototypes and keep a gallery page of them.

Usage:
    python prototype_gallery.py [global options] <command> [args]

Commands:
    scan                 Show the prototypes found, grouped by category
    deploy [name]        Publish one prototype, or every changed one
    deploy-all           Publish changed prototypes, rebuild and publish the gallery
    render               Rebuild the gallery page without publishing
    list                 Show every prototype with its cached URL
    url <name>           Print the cached URL of a prototype
    quick <file.html>    Copy a loose HTML file into the prototypes and publish it
    new <category> <name>  Create a new prototype from the starter template

Notes:
- Per-prototype failures are reported and the run continues; the exit code is
  non-zero only for setup problems (hosting CLI missing, not logged in,
  prototypes folder missing) or when a single requested prototype fails.
- The cache file is not locked: do not run two deploys at the same time.
- --verbose prints the full deploy CLI output under each failed publish.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import config as cfg
from pipeline_manager import GalleryPipeline
from prototype_scanner import Item, classify_dir, count_items, find_item, iter_items, scan
from publish_cache import PublishCache, parse_timestamp
from publisher import EnvironmentCheckError, VercelPublisher
from utils.file_ops import copy_quick_prototype, create_prototype, iter_html_files
from utils.site_paths import (
    PathValidationError,
    resolve_cache_path,
    resolve_gallery_dir,
    resolve_prototypes_dir,
)


def make_publisher():
    return VercelPublisher(cfg.DEPLOY_COMMAND, timeout=cfg.DEPLOY_TIMEOUT)


def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="prototype-gallery",
        description="Publish HTML prototypes and maintain a gallery page that links to them.",
    )
    p.add_argument("--prototypes-dir", help=f"Prototypes root (default {cfg.PROTOTYPES_DIR})")
    p.add_argument("--gallery-dir", help=f"Gallery output dir (default {cfg.GALLERY_DIR})")
    p.add_argument("--cache", help="Deployments cache file (default <gallery-dir>/deployments.json)")
    p.add_argument("-v", "--verbose", action="store_true", help="Print the full deploy CLI output on failures")

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("scan", help="Show the prototypes found")

    deploy = sub.add_parser("deploy", help="Publish one prototype, or every changed one")
    deploy.add_argument("name", nargs="?", help="Prototype slug or category/slug")
    deploy.add_argument("--force", action="store_true", help="Publish even if nothing changed")

    deploy_all = sub.add_parser("deploy-all", help="Publish changes, rebuild and publish the gallery")
    deploy_all.add_argument("--force", action="store_true", help="Republish every prototype")
    deploy_all.add_argument("--no-gallery-deploy", action="store_true",
                            help="Rebuild the gallery page but do not publish it")

    sub.add_parser("render", help="Rebuild the gallery page without publishing")
    sub.add_parser("list", help="List prototypes and their URLs")

    url = sub.add_parser("url", help="Print the cached URL of a prototype")
    url.add_argument("name", help="Prototype slug or category/slug")

    quick = sub.add_parser("quick", help="Publish a loose HTML file")
    quick.add_argument("file", nargs="?", help="HTML file to publish")

    new = sub.add_parser("new", help="Create a new prototype")
    new.add_argument("category", help="Category folder, e.g. onboarding")
    new.add_argument("name", help="Prototype folder, e.g. welcome-screen")
    return p.parse_args(argv)


def _check_prototypes_dir(root: Path) -> bool:
    if root.is_dir():
        return True
    print(f"❌ Prototypes directory not found: {root}")
    print(f"   Create it with: mkdir -p {root}")
    return False


def _check_publisher(publisher) -> bool:
    try:
        version, user = publisher.check_environment()
    except EnvironmentCheckError as exc:
        print(f"❌ {exc}")
        return False
    print(f"✅ Deploy CLI found: {version}")
    print(f"✅ Logged in as: {user}")
    return True


def _slug_from_name(name: str) -> str:
    return name.strip().strip("/").rsplit("/", 1)[-1]


def cmd_scan(root: Path) -> int:
    tree = scan(root)
    if not tree:
        print("⚠️  No prototypes found. Add folders with an index.html to the prototypes directory.")
        return 0
    print(f"🔍 Found {count_items(tree)} prototypes in {len(tree)} categories")
    for category, items in tree.items():
        print(f"\n{category}")
        for item in items:
            print(f"  • {item.name} ({item.slug}) - {item.description}")
    return 0


def cmd_list(root: Path, cache: PublishCache) -> int:
    tree = scan(root)
    cache.load()
    if not tree:
        print("⚠️  No prototypes found. Add folders with an index.html to the prototypes directory.")
        return 0
    print("📦 Available prototypes:\n")
    for item in iter_items(tree):
        record = cache.get(item.slug)
        print(f"• {item.key}")
        if record:
            published = parse_timestamp(record.published_at)
            when = published.strftime("%Y-%m-%d %H:%M") if published else "unknown"
            print(f"  URL: {record.url}")
            print(f"  Deployed: {when}")
        else:
            print("  Status: Not deployed")
    return 0


def cmd_url(cache: PublishCache, name: str) -> int:
    cache.load()
    url = cache.url_for(_slug_from_name(name))
    if not url:
        print(f"⚠️  Prototype \"{name}\" has not been deployed yet.")
        print("   Run: prototype-gallery deploy " + name)
        return 1
    print(url)
    return 0


def cmd_deploy(pipeline: GalleryPipeline, name: Optional[str], force: bool) -> int:
    pipeline.cache.load()
    tree = pipeline.scan()
    if not name:
        pipeline.publish_changed(tree, force=force)
        return 0

    item = find_item(tree, name)
    if item is None:
        print(f"❌ Prototype \"{name}\" not found")
        return 1
    return 0 if pipeline.publish_item(item, force=True) else 1


def cmd_quick(pipeline: GalleryPipeline, file: Optional[str]) -> int:
    if not file:
        candidates = iter_html_files(Path.cwd())
        if candidates:
            print("⚡ HTML files in the current directory:")
            for candidate in candidates:
                print(f"  • {candidate.name}")
            print("   Run: prototype-gallery quick <file.html>")
        else:
            print("⚠️  No HTML files found in the current directory.")
        return 1

    try:
        proto_dir = copy_quick_prototype(Path(file), pipeline.prototypes_dir)
    except FileNotFoundError as exc:
        print(f"❌ {exc}")
        return 1
    print(f"⚡ Copied {file} to {proto_dir}")

    item = classify_dir(proto_dir)
    if not isinstance(item, Item):
        print(f"❌ Could not read {proto_dir}")
        return 1
    pipeline.cache.load()
    return 0 if pipeline.publish_item(item, force=True) else 1


def cmd_new(root: Path, category: str, name: str) -> int:
    try:
        proto_dir = create_prototype(root, category, name)
    except (FileExistsError, PathValidationError) as exc:
        print(f"❌ {exc}")
        return 1
    print(f"✅ Created new prototype: {proto_dir}")
    print(f"   1. Edit your prototype: {proto_dir / cfg.ENTRY_FILE}")
    print("   2. Deploy: prototype-gallery deploy-all")
    print(f"   It will be listed under '{category}' in the gallery.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv if argv is None else argv
    args = parse_args(argv[1:])

    root = resolve_prototypes_dir(args.prototypes_dir)
    gallery_dir = resolve_gallery_dir(args.gallery_dir)
    cache = PublishCache(resolve_cache_path(args.cache, gallery_dir))

    if args.command == "new":
        return cmd_new(root, args.category, args.name)
    if args.command == "url":
        return cmd_url(cache, args.name)

    if not _check_prototypes_dir(root):
        return 1
    if args.command == "scan":
        return cmd_scan(root)
    if args.command == "list":
        return cmd_list(root, cache)

    if args.command == "render":
        pipeline = GalleryPipeline(root, gallery_dir, cache, None)
        pipeline.cache.load()
        pipeline.build_gallery(pipeline.scan())
        return 0

    publisher = make_publisher()
    if not _check_publisher(publisher):
        return 1

    pipeline = GalleryPipeline(root, gallery_dir, cache, publisher, verbose=args.verbose)
    if args.command == "deploy":
        return cmd_deploy(pipeline, args.name, args.force)
    if args.command == "quick":
        return cmd_quick(pipeline, args.file)

    pipeline.sync(force=args.force, deploy_gallery=not args.no_gallery_deploy)
    return 0


def run() -> None:
    raise SystemExit(main(sys.argv))


if __name__ == "__main__":
    run()
