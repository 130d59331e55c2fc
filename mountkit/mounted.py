"""Deciding whether a path is a mount point."""

from __future__ import annotations

import os
from typing import Tuple

from mountkit.info import get_mounts, single_entry_filter

__all__ = [
    "normalize_path",
    "mounted_by_stat",
    "mounted_by_mountinfo",
    "mounted_fast",
    "mounted",
]


def normalize_path(path: "str | os.PathLike[str]") -> str:
    """Return the absolute, symlink-free form of an existing path."""
    real = os.path.realpath(os.path.abspath(os.fspath(path)), strict=True)
    os.stat(real)
    return real


def mounted_by_stat(path: str) -> bool:
    """Compare device numbers of ``path`` and its parent; misses bind mounts."""
    device = os.lstat(path).st_dev
    parent = os.path.dirname(path) or "."
    return device != os.lstat(parent).st_dev


def mounted_by_mountinfo(path: str) -> bool:
    """Look the normalized ``path`` up in the mount table."""
    return bool(get_mounts(single_entry_filter(path)))


def _mounted_fast(path: str) -> Tuple[bool, bool]:
    if path == os.sep:
        return True, True
    # A negative answer from stat may be a bind mount, so only trust a positive.
    if mounted_by_stat(path):
        return True, True
    return False, False


def mounted_fast(path: "str | os.PathLike[str]") -> Tuple[bool, bool]:
    """Return ``(mounted, sure)`` without reading the mount table.

    Only trust ``mounted`` when ``sure`` is true. A missing path raises
    ``FileNotFoundError``.
    """
    if os.fspath(path) == os.sep:
        return True, True
    return _mounted_fast(normalize_path(path))


def mounted(path: "str | os.PathLike[str]") -> bool:
    """Tell whether ``path`` is a mount point; a missing path raises."""
    if os.fspath(path) == os.sep:
        return True
    real = normalize_path(path)
    try:
        is_mounted, sure = _mounted_fast(real)
    except OSError:
        sure = False
    if sure:
        return is_mounted
    return mounted_by_mountinfo(real)