"""
Header block assembly for the renderer's source document.

The renderer reads a front-matter block of `key: value` lines between
`--- ` sentinels.  Existing templates expect the keys in this order:

    declared fields (content type order, only those with a value)
    layout assets   (association order)
    qrcode
    path

Line format is kept byte-compatible with the templates in use,
including the trailing space after each value.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from doccraft.core.constants import HEADER_SENTINEL


def field_lines(field_names: Iterable[str], serialized: Mapping[str, Any]) -> list[str]:
    """One line per declared field present in `serialized`; missing fields are skipped."""
    return [
        f"{name}: {serialized[name]} \n"
        for name in field_names
        if name in serialized
    ]


def asset_line(name: str, url: str) -> str:
    return f"{name}: {strip_url_prefix(url)} \n"


def strip_url_prefix(url: str) -> str:
    """
    Drop the leading "/" of a site-relative asset URL.

    Local storage yields "/uploads/assets/...", which the renderer must
    see as a path relative to the working directory.  Absolute URLs
    (presigned S3) pass through untouched.
    """
    return url[1:] if url.startswith("/") else url


def assemble_header(
    field_names: Iterable[str],
    serialized: Mapping[str, Any],
    asset_urls: Iterable[tuple[str, str]],
    qr_path: str,
    workspace_path: str,
) -> str:
    """Build the complete header block, sentinels included."""
    parts = [HEADER_SENTINEL]
    parts.extend(field_lines(field_names, serialized))
    parts.extend(asset_line(name, url) for name, url in asset_urls)
    parts.append(f"qrcode: {qr_path} \n")
    parts.append(f"path: {workspace_path}\n")
    parts.append(HEADER_SENTINEL)
    return "".join(parts)


def compose_source(header: str, raw: str) -> str:
    """Header, a blank line, then the instance body."""
    return f"{header}\n{raw}\n"
