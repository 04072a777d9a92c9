"""
Everything query syntax helpers.
"""

from __future__ import annotations

__all__ = ["expand_wildcards", "build_search_string"]


def expand_wildcards(keyword: str) -> str:
    """
    Turn every whitespace-separated token into a prefix match.

    Tokens that already carry a ``*`` or ``?`` wildcard are left alone.

    Example:
        >>> expand_wildcards("annual  report*  q?")
        'annual* report* q?'
    """
    tokens = keyword.split()
    return " ".join(t if ("*" in t or "?" in t) else t + "*" for t in tokens)


def build_search_string(keyword: str, scope_root: str | None = None) -> str:
    """Full Everything search string, optionally restricted to a directory tree."""
    search = expand_wildcards(keyword)
    if not scope_root:
        return search

    sep = "/" if "/" in scope_root and "\\" not in scope_root else "\\"
    root = scope_root.rstrip("\\/") + sep
    return f'path:"{root}*" {search}'
