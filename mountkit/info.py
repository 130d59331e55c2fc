"""Reading and filtering the mount table of the running process."""

from __future__ import annotations

import functools
import os
import re
import threading
from dataclasses import dataclass
from typing import IO, Callable, Iterable, List, Optional, Tuple, Union

__all__ = [
    "Info",
    "FilterFunc",
    "prefix_filter",
    "single_entry_filter",
    "parents_filter",
    "fs_type_filter",
    "unescape",
    "get_mounts_from_reader",
    "get_mounts",
    "pid_mount_info",
]


@dataclass
class Info:
    """One entry of a mountinfo table."""

    id: int = 0
    parent: int = 0
    major: int = 0
    minor: int = 0
    root: str = ""
    mountpoint: str = ""
    options: str = ""
    optional: str = ""
    fstype: str = ""
    source: str = ""
    vfs_options: str = ""


# A filter returns (skip, stop): skip drops the entry, stop ends parsing after it.
FilterFunc = Callable[[Info], Tuple[bool, bool]]


def prefix_filter(prefix: str) -> FilterFunc:
    """Keep entries whose mount point is ``prefix`` or lies under it."""

    def _filter(info: Info) -> Tuple[bool, bool]:
        return not (info.mountpoint + "/").startswith(prefix + "/"), False

    return _filter


def single_entry_filter(mp: str) -> FilterFunc:
    """Keep only the first entry whose mount point equals ``mp``."""

    def _filter(info: Info) -> Tuple[bool, bool]:
        if info.mountpoint == mp:
            return False, True
        return True, False

    return _filter


def parents_filter(path: str) -> FilterFunc:
    """Keep entries whose mount points may be parents of ``path``."""

    def _filter(info: Info) -> Tuple[bool, bool]:
        return not path.startswith(info.mountpoint), False

    return _filter


def fs_type_filter(*args: str) -> FilterFunc:
    """Keep entries whose filesystem type is one of the given ones."""
    wanted = frozenset(args)

    def _filter(info: Info) -> Tuple[bool, bool]:
        return info.fstype not in wanted, False

    return _filter


_ESCAPE = re.compile(rb"\\(.{0,3})", re.DOTALL)
_OCTAL = re.compile(rb"[0-7]{3}")


def _show(raw: bytes) -> str:
    return repr(raw.decode("utf-8", "surrogateescape"))


def _replace_escape(match: "re.Match[bytes]") -> bytes:
    seq = match.group(1)
    whole = match.group(0)
    if len(seq) < 3:
        raise ValueError(f"bad escape sequence {_show(whole)}: too short")
    if not _OCTAL.fullmatch(seq):
        raise ValueError(f"bad escape sequence {_show(whole[:3])}: not a digit")
    value = int(seq, 8)
    if value > 255:
        raise ValueError(f"bad escape sequence {_show(whole[:3])}: out of range")
    return bytes([value])


def unescape(path: str) -> str:
    """Undo the octal escapes (``\\040`` and the like) used in mountinfo paths."""
    if "\\" not in path:
        return path
    raw = path.encode("utf-8", "surrogateescape")
    return _ESCAPE.sub(_replace_escape, raw).decode("utf-8", "surrogateescape")


_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)


def _atoi(text: str) -> int:
    return int(text) if _INTEGER.fullmatch(text) else 0


def _unescape_field(value: str, what: str) -> str:
    try:
        return unescape(value)
    except ValueError as exc:
        raise ValueError(f"parsing '{value}' failed: {what}: {exc}") from exc


def _parse_line(text: str) -> Info:
    # Layout: id parent major:minor root mountpoint options [optional...] - fstype source super-options
    fields = text.split(" ")
    count = len(fields)
    if count < 10:
        raise ValueError(f"parsing '{text}' failed: not enough fields ({count})")

    # Old kernels may leave spaces in the last field, so search for the separator.
    sep = count - 4
    while fields[sep] != "-":
        sep -= 1
        if sep == 5:
            raise ValueError(f"parsing '{text}' failed: missing - separator")

    mountpoint = _unescape_field(fields[4], "mount point")
    fstype = _unescape_field(fields[sep + 1], "fstype")
    source = _unescape_field(fields[sep + 2], "source")

    major_minor = fields[2].split(":", 2)
    if len(major_minor) != 2:
        raise ValueError(
            f"parsing '{text}' failed: unexpected major:minor pair {major_minor}"
        )

    root = _unescape_field(fields[3], "root")

    return Info(
        id=_atoi(fields[0]),
        parent=_atoi(fields[1]),
        major=_atoi(major_minor[0]),
        minor=_atoi(major_minor[1]),
        root=root,
        mountpoint=mountpoint,
        options=fields[5],
        optional=" ".join(fields[6:sep]),
        fstype=fstype,
        source=source,
        vfs_options=fields[sep + 3],
    )


def _line_text(line: Union[str, bytes]) -> str:
    if isinstance(line, bytes):
        line = line.decode("utf-8", "surrogateescape")
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def get_mounts_from_reader(
    reader: Union[IO[str], IO[bytes], Iterable[Union[str, bytes]]],
    filter: Optional[FilterFunc] = None,
) -> List[Info]:
    """Parse mountinfo lines from ``reader``, applying the optional filter."""
    out: List[Info] = []
    for line in reader:
        info = _parse_line(_line_text(line))
        stop = False
        if filter is not None:
            skip, stop = filter(info)
            if skip:
                continue
        out.append(info)
        if stop:
            break
    return out


@functools.lru_cache(maxsize=None)
def _have_proc_thread_self() -> bool:
    return os.path.exists("/proc/thread-self/mountinfo")


def _open_table(path: str) -> IO[str]:
    return open(path, encoding="utf-8", errors="surrogateescape", newline="\n")


def _open_mount_table() -> IO[str]:
    if _have_proc_thread_self():
        return _open_table("/proc/thread-self/mountinfo")
    try:
        return _open_table(f"/proc/self/task/{threading.get_native_id()}/mountinfo")
    except FileNotFoundError:
        # Our pid namespace differs from that of /proc; the process view will do.
        return _open_table("/proc/self/mountinfo")


def get_mounts(filter: Optional[FilterFunc] = None) -> List[Info]:
    """Return the mounts seen by the current thread, optionally filtered."""
    with _open_mount_table() as table:
        return get_mounts_from_reader(table, filter)


def pid_mount_info(pid: int) -> List[Info]:
    """Return the mounts in the mount namespace of process ``pid``."""
    with _open_table(f"/proc/{pid}/mountinfo") as table:
        return get_mounts_from_reader(table, None)