"""Reexports common helpers for the gallery tooling."""

from utils.file_ops import (
    copy_quick_prototype,
    create_prototype,
    iter_html_files,
)
from utils.html_tools import (
    get_gallery_css,
    prototype_template,
    read_html_title,
)

__all__ = [
    "copy_quick_prototype",
    "create_prototype",
    "get_gallery_css",
    "iter_html_files",
    "prototype_template",
    "read_html_title",
]
