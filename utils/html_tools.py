from __future__ import annotations

from pathlib import Path

from bs4 import BeautifulSoup


def read_html_title(html_file: Path) -> str | None:
    """Return the text of the first <title> in an HTML file, or None.

    Read errors propagate; callers decide how to fall back.
    """
    with open(html_file, "r", encoding="utf-8", errors="replace") as f:
        soup = BeautifulSoup(f, "html.parser")
    if soup.title is None:
        return None
    return soup.title.get_text()


def get_gallery_css() -> str:
    """Return the gallery page CSS: header, tiles and the command palette."""
    return (
        "* { margin: 0; padding: 0; box-sizing: border-box; }\n"
        "body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
        "padding: 20px; background: #f5f5f5; line-height: 1.6; }\n"
        ".header { display: flex; justify-content: space-between; align-items: center; "
        "margin-bottom: 30px; padding-bottom: 20px; border-bottom: 2px solid #e0e0e0; }\n"
        "h1 { color: #333; font-weight: 300; }\n"
        ".subtitle { color: #666; margin-top: 5px; }\n"
        ".header-meta { display: flex; gap: 10px; align-items: center; }\n"
        ".sync-status, .cmd-hint { font-size: 12px; color: #666; background: white; "
        "padding: 6px 12px; border-radius: 6px; border: 1px solid #ddd; }\n"
        ".kbd { background: #f0f0f0; padding: 2px 6px; border-radius: 4px; font-family: monospace; "
        "font-size: 12px; border: 1px solid #d0d0d0; }\n"
        ".feature-section { margin-bottom: 40px; }\n"
        ".feature-title { font-size: 18px; color: #666; margin-bottom: 15px; padding-bottom: 8px; "
        "border-bottom: 2px solid #e0e0e0; text-transform: capitalize; }\n"
        ".grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(300px, 1fr)); gap: 20px; }\n"
        ".tile { background: white; border: 1px solid #ddd; border-radius: 8px; padding: 20px; "
        "text-decoration: none; color: inherit; position: relative; transition: box-shadow 0.2s; }\n"
        ".tile:hover { box-shadow: 0 4px 12px rgba(0,0,0,0.1); }\n"
        ".tile.pending { opacity: 0.6; cursor: not-allowed; pointer-events: none; }\n"
        ".tile h3 { font-size: 16px; margin-bottom: 8px; color: #0066cc; }\n"
        ".tile p { color: #666; font-size: 14px; }\n"
        ".status { margin-top: 10px; font-size: 12px; color: #28a745; }\n"
        ".tile.pending .status { color: #b8860b; }\n"
        ".deployment-time { position: absolute; top: 10px; right: 10px; font-size: 11px; color: #999; }\n"
        ".empty-state { text-align: center; padding: 60px 20px; color: #666; }\n"
        ".empty-state h2 { margin-bottom: 10px; color: #999; }\n"
        ".cmd-palette { display: none; position: fixed; inset: 0; background: rgba(0,0,0,0.5); z-index: 9999; }\n"
        ".cmd-palette.open { display: flex; align-items: flex-start; justify-content: center; padding-top: 100px; }\n"
        ".cmd-modal { background: white; border-radius: 12px; width: 90%; max-width: 600px; max-height: 400px; "
        "display: flex; flex-direction: column; box-shadow: 0 16px 70px rgba(0,0,0,0.2); }\n"
        ".cmd-input-wrapper { padding: 16px; border-bottom: 1px solid #e0e0e0; }\n"
        ".cmd-input { width: 100%; padding: 8px 12px; font-size: 16px; border: none; outline: none; background: transparent; }\n"
        ".cmd-results { overflow-y: auto; max-height: 320px; }\n"
        ".cmd-item { padding: 12px 16px; cursor: pointer; display: flex; align-items: center; gap: 12px; "
        "border-left: 3px solid transparent; }\n"
        ".cmd-item:hover, .cmd-item.selected { background: #f8f8f8; border-left-color: #0066cc; }\n"
        ".cmd-item-content { flex: 1; }\n"
        ".cmd-item-title { font-size: 14px; font-weight: 500; color: #333; }\n"
        ".cmd-item-desc { font-size: 12px; color: #666; margin-top: 2px; }\n"
        ".cmd-item-feature { font-size: 11px; color: #999; padding: 2px 6px; background: #f5f5f5; border-radius: 4px; }\n"
        ".no-results { padding: 40px; text-align: center; color: #999; font-size: 14px; }\n"
    )


def prototype_template(title: str) -> str:
    """Starter index.html for a new prototype; Esc goes back to the gallery."""
    return (
        "<!DOCTYPE html>\n"
        "<html lang=\"en\">\n<head>\n<meta charset=\"UTF-8\">\n"
        "<meta name=\"viewport\" content=\"width=device-width, initial-scale=1.0\">\n"
        f"<title>{title}</title>\n"
        "<style>\n"
        "* { margin: 0; padding: 0; box-sizing: border-box; }\n"
        "body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
        "display: flex; justify-content: center; align-items: center; min-height: 100vh; background: #f5f5f5; }\n"
        ".back-button { position: fixed; top: 20px; left: 20px; background: rgba(255,255,255,0.9); "
        "border: 1px solid #ddd; padding: 8px 16px; border-radius: 6px; text-decoration: none; color: #333; font-size: 14px; }\n"
        ".container { background: white; padding: 40px; border-radius: 12px; "
        "box-shadow: 0 4px 12px rgba(0,0,0,0.1); max-width: 600px; width: 90%; }\n"
        "h1 { margin-bottom: 20px; color: #333; }\n"
        "p { color: #666; line-height: 1.6; }\n"
        "</style>\n"
        "</head>\n<body>\n"
        "<a href=\"#\" class=\"back-button\" onclick=\"history.back(); return false;\">← Back to Gallery "
        "<span style=\"opacity: 0.6; font-size: 12px;\">(Esc)</span></a>\n"
        "<div class=\"container\">\n"
        "<h1>New Prototype</h1>\n"
        "<p>Start building your prototype here.</p>\n"
        "</div>\n"
        "<script>\n"
        "document.addEventListener('keydown', function (e) {\n"
        "  if (e.key === 'Escape') { window.history.back(); }\n"
        "});\n"
        "</script>\n"
        "</body>\n</html>\n"
    )
