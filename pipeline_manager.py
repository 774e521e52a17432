#!/usr/bin/env python3
"""
GalleryPipeline - scan, publish changed prototypes, rebuild and publish the gallery.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

import config as cfg
import gallery_renderer
from change_detector import needs_publish, source_mtime
from prototype_scanner import Item, Tree, count_items, iter_items, scan
from publish_cache import PublishCache
from publisher import PublishError, Publisher, project_name


def _local_now() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M")


@dataclass
class SyncReport:
    needed: int = 0
    published: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    gallery_path: Optional[Path] = None
    gallery_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.failed


class GalleryPipeline:
    """Sequential publish loop around an explicit cache and publisher.

    `publisher` may be None for a pipeline that only scans and renders.
    """

    def __init__(
        self,
        prototypes_dir: Path,
        gallery_dir: Path,
        cache: PublishCache,
        publisher: Optional[Publisher],
        *,
        title: str = cfg.GALLERY_TITLE,
        description: str = cfg.GALLERY_DESCRIPTION,
        gallery_project: str = cfg.GALLERY_PROJECT,
        project_prefix: str = cfg.PROJECT_PREFIX,
        clock: Callable[[], str] = _local_now,
        verbose: bool = False,
    ):
        self.prototypes_dir = Path(prototypes_dir)
        self.gallery_dir = Path(gallery_dir)
        self.cache = cache
        self.publisher = publisher
        self.title = title
        self.description = description
        self.gallery_project = gallery_project
        self.project_prefix = project_prefix
        self.clock = clock
        self.verbose = verbose

    def scan(self) -> Tree:
        print("🔍 Scanning prototypes directory...")
        tree = scan(self.prototypes_dir)
        print(f"✅ Found {count_items(tree)} prototypes in {len(tree)} categories")
        for category, items in tree.items():
            print(f"   {category}: {len(items)} prototype(s)")
        return tree

    def _report_failure(self, label: str, exc: PublishError) -> None:
        print(f"❌ Failed to deploy {label}: {exc}")
        if self.verbose and exc.output:
            for line in exc.output.rstrip().splitlines():
                print(f"   | {line}")

    def publish_item(self, item: Item, *, force: bool = False) -> Optional[str]:
        """Publish one item and save the cache; None when skipped or failed.

        A failure leaves the cached record untouched.
        """
        if not force and not needs_publish(item, self.cache.get(item.slug)):
            print(f"⏭️  {item.name} - no changes, using cached URL")
            return None

        try:
            modified = source_mtime(item)
        except OSError as exc:
            print(f"❌ Failed to deploy {item.name}: {exc}")
            return None

        print(f"🚀 Deploying {item.name}...")
        try:
            url = self.publisher.publish(item.path, project_name(item.slug, self.project_prefix))
        except PublishError as exc:
            self._report_failure(item.name, exc)
            return None

        self.cache.record_publish(item, url, last_modified=modified)
        self.cache.save()
        print(f"✅ Deployed to: {url}")
        return url

    def publish_changed(self, tree: Tree, *, force: bool = False) -> SyncReport:
        """Publish every item that changed, one after another."""
        report = SyncReport()
        for item in iter_items(tree):
            if not force and not needs_publish(item, self.cache.get(item.slug)):
                print(f"⏭️  {item.name} - no changes, using cached URL")
                report.skipped.append(item.slug)
                continue

            report.needed += 1
            url = self.publish_item(item, force=True)
            if url:
                report.published.append(item.slug)
            else:
                report.failed.append(item.slug)

        if report.needed:
            print(f"📦 Deployed {len(report.published)} of {report.needed} prototypes")
        else:
            print("📦 All prototypes up to date")
        return report

    def build_gallery(self, tree: Tree) -> Path:
        document = gallery_renderer.render(
            tree,
            self.cache,
            title=self.title,
            description=self.description,
            generated_at=self.clock(),
        )
        out_path = gallery_renderer.write_gallery(self.gallery_dir, document)
        print(f"✅ Gallery updated: {out_path}")
        return out_path

    def publish_gallery(self) -> Optional[str]:
        print("🚀 Deploying gallery...")
        try:
            url = self.publisher.publish(self.gallery_dir, self.gallery_project)
        except PublishError as exc:
            self._report_failure("gallery", exc)
            return None
        print(f"✅ Gallery deployed to: {url}")
        return url

    def sync(self, *, force: bool = False, deploy_gallery: bool = True) -> SyncReport:
        """Run the whole flow; the cache is saved and the gallery rebuilt even after failures."""
        tree = self.scan()
        self.cache.load()
        print(f"📦 Loaded {len(self.cache)} cached deployments")

        try:
            report = self.publish_changed(tree, force=force)
        finally:
            self.cache.save()

        report.gallery_path = self.build_gallery(tree)
        if deploy_gallery:
            report.gallery_url = self.publish_gallery()
        print("✅ Sync complete!")
        return report
