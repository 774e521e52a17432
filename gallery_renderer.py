"""Render the static gallery page from the scanned tree and the publish cache."""

from __future__ import annotations

import html
import json
from pathlib import Path
from typing import Dict, List

from prototype_scanner import Item, Tree, iter_items
from publish_cache import PublishCache, parse_timestamp
from utils.html_tools import get_gallery_css

GALLERY_VIEWPORT = "width=device-width, initial-scale=1.0"
GALLERY_VERCEL_CONFIG = {"public": True, "cleanUrls": True, "trailingSlash": False}

# Mirrors command_palette.filter_entries / PaletteState.
PALETTE_SCRIPT = """
(function () {
  var entries = JSON.parse(document.getElementById('gallery-data').textContent);
  var palette = document.getElementById('cmdPalette');
  var input = document.getElementById('cmdInput');
  var list = document.getElementById('cmdResults');
  var results = [];
  var selected = 0;

  function searchable(entry) {
    return typeof entry.url === 'string' && entry.url !== '' && entry.url !== '#';
  }

  function filterEntries(query) {
    var published = entries.filter(searchable);
    var needle = (query || '').trim().toLowerCase();
    if (!needle) { return published; }
    return published.filter(function (entry) {
      return ['name', 'description', 'category', 'slug'].some(function (field) {
        return String(entry[field] || '').toLowerCase().indexOf(needle) !== -1;
      });
    });
  }

  function escapeHtml(text) {
    var div = document.createElement('div');
    div.textContent = text;
    return div.innerHTML;
  }

  function render() {
    if (results.length === 0) {
      list.innerHTML = '<div class="no-results">No deployed prototypes found</div>';
      return;
    }
    list.innerHTML = results.map(function (entry, index) {
      return '<div class="cmd-item' + (index === selected ? ' selected' : '') + '" data-index="' + index + '">' +
        '<div class="cmd-item-content">' +
        '<div class="cmd-item-title">' + escapeHtml(entry.name) + '</div>' +
        '<div class="cmd-item-desc">' + escapeHtml(entry.description) + '</div>' +
        '</div>' +
        '<span class="cmd-item-feature">' + escapeHtml(entry.category) + '</span>' +
        '</div>';
    }).join('');
  }

  function isOpen() { return palette.classList.contains('open'); }

  function open() {
    palette.classList.add('open');
    input.value = '';
    selected = 0;
    results = filterEntries('');
    render();
    input.focus();
  }

  function close() {
    palette.classList.remove('open');
    selected = 0;
  }

  function move(delta) {
    if (results.length === 0) { return; }
    selected = Math.max(0, Math.min(selected + delta, results.length - 1));
    render();
  }

  function select(index) {
    var entry = results[index];
    if (entry && searchable(entry)) { window.location.href = entry.url; }
  }

  document.addEventListener('keydown', function (e) {
    if ((e.metaKey || e.ctrlKey) && e.key.toLowerCase() === 'k') {
      e.preventDefault();
      open();
      return;
    }
    if (!isOpen()) { return; }
    if (e.key === 'Escape') {
      close();
    } else if (e.key === 'ArrowDown') {
      e.preventDefault();
      move(1);
    } else if (e.key === 'ArrowUp') {
      e.preventDefault();
      move(-1);
    } else if (e.key === 'Enter') {
      e.preventDefault();
      select(selected);
    }
  });

  input.addEventListener('input', function (e) {
    results = filterEntries(e.target.value);
    selected = 0;
    render();
  });

  list.addEventListener('click', function (e) {
    var row = e.target.closest('.cmd-item');
    if (row) { select(parseInt(row.dataset.index, 10)); }
  });

  palette.addEventListener('click', function (e) {
    if (e.target === palette) { close(); }
  });
})();
"""


def _format_date(value: str) -> str:
    parsed = parse_timestamp(value)
    return parsed.strftime("%Y-%m-%d") if parsed else ""


def category_title(category: str) -> str:
    return category.replace("-", " ")


def build_search_index(tree: Tree, cache: PublishCache) -> List[Dict[str, str]]:
    """Published items in gallery order; pending items are left out."""
    index: List[Dict[str, str]] = []
    for item in iter_items(tree):
        url = cache.url_for(item.slug)
        if not url:
            continue
        index.append(
            {
                "slug": item.slug,
                "name": item.name,
                "description": item.description,
                "category": item.category,
                "url": url,
            }
        )
    return index


def render_tile(item: Item, cache: PublishCache) -> str:
    record = cache.get(item.slug)
    name = html.escape(item.name)
    description = html.escape(item.description)
    if record is None:
        return (
            '<a href="#" class="tile pending" aria-disabled="true" tabindex="-1" onclick="return false;">'
            f"<h3>{name}</h3><p>{description}</p>"
            '<div class="status">⏳ Pending deployment</div></a>'
        )

    href = html.escape(record.url, quote=True)
    date = _format_date(record.published_at)
    date_html = f'<div class="deployment-time">{html.escape(date)}</div>' if date else ""
    return (
        f'<a href="{href}" class="tile deployed">{date_html}'
        f"<h3>{name}</h3><p>{description}</p>"
        '<div class="status">✓ Deployed</div></a>'
    )


def render_sections(tree: Tree, cache: PublishCache) -> str:
    if not tree:
        return (
            '<div class="empty-state"><h2>No prototypes found</h2>'
            "<p>Add prototypes to your prototypes directory and redeploy.</p></div>"
        )

    sections: List[str] = []
    for category, items in tree.items():
        tiles = "\n".join(render_tile(item, cache) for item in items)
        sections.append(
            '<div class="feature-section">'
            f'<h2 class="feature-title">{html.escape(category_title(category))}</h2>'
            f'<div class="grid">\n{tiles}\n</div></div>'
        )
    return "\n".join(sections)


def _json_for_script(data: object) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False).replace("</", "<\\/")


def render(tree: Tree, cache: PublishCache, *, title: str, description: str, generated_at: str) -> str:
    """Build the gallery document. `generated_at` is the only time-dependent text."""
    esc_title = html.escape(title)
    search_index = build_search_index(tree, cache)
    return (
        '<!DOCTYPE html>\n<html lang="en">\n<head>\n<meta charset="UTF-8">\n'
        f'<meta name="viewport" content="{GALLERY_VIEWPORT}">\n'
        f"<title>{esc_title}</title>\n"
        f"<style>\n{get_gallery_css()}</style>\n"
        "</head>\n<body>\n"
        '<div class="header"><div>'
        f"<h1>{esc_title}</h1>"
        f'<div class="subtitle">{html.escape(description)}</div></div>'
        '<div class="header-meta">'
        f'<div class="sync-status">Last sync: {html.escape(generated_at)}</div>'
        '<div class="cmd-hint">Press <span class="kbd">⌘</span><span class="kbd">K</span> to search</div>'
        "</div></div>\n"
        f'<div id="feature-sections">\n{render_sections(tree, cache)}\n</div>\n'
        '<div class="cmd-palette" id="cmdPalette"><div class="cmd-modal">'
        '<div class="cmd-input-wrapper">'
        '<input type="text" class="cmd-input" id="cmdInput" placeholder="Search prototypes..." autocomplete="off">'
        "</div>"
        '<div class="cmd-results" id="cmdResults"></div>'
        "</div></div>\n"
        f'<script type="application/json" id="gallery-data">{_json_for_script(search_index)}</script>\n'
        f"<script>{PALETTE_SCRIPT}</script>\n"
        "</body>\n</html>\n"
    )


def write_gallery(gallery_dir: Path, document: str) -> Path:
    """Write index.html plus the hosting config for the gallery folder."""
    gallery_dir.mkdir(parents=True, exist_ok=True)
    out_path = gallery_dir / "index.html"
    out_path.write_text(document, encoding="utf-8")
    config_path = gallery_dir / "vercel.json"
    config_path.write_text(json.dumps(GALLERY_VERCEL_CONFIG, indent=2) + "\n", encoding="utf-8")
    return out_path
