"""Shared URL utilities."""

from __future__ import annotations

from urllib.parse import urlparse


def join_url(base_url: str, path: str) -> str:
    """Join an app path like '/app/discover' onto the base URL.

    Absolute URLs are returned unchanged.
    """
    if urlparse(path).scheme:
        return path
    base = base_url.rstrip("/")
    if not path or path == "/":
        return base + "/"
    return f"{base}/{path.lstrip('/')}"
