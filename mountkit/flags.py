"""Mount flags and parsing of fstab-style option strings."""

from __future__ import annotations

import enum
from typing import Dict, Iterable, List, NamedTuple, Tuple

__all__ = [
    "MountFlag",
    "MNT_DETACH",
    "parse_options",
    "merge_tmpfs_options",
]

_MS_REC = 0x4000

# Flag for umount2(2) requesting a lazy (detached) unmount.
MNT_DETACH = 0x2


class MountFlag(enum.IntFlag):
    """Flags understood by mount(2) on Linux."""

    RDONLY = 0x1
    """Mount the file system read-only."""
    NOSUID = 0x2
    """Ignore set-user-identifier and set-group-identifier bits."""
    NODEV = 0x4
    """Do not interpret character or block special devices."""
    NOEXEC = 0x8
    """Do not allow execution of binaries."""
    SYNCHRONOUS = 0x10
    """Do all I/O to the file system synchronously."""
    REMOUNT = 0x20
    """Change the flags of an already mounted file system."""
    MANDLOCK = 0x40
    """Force mandatory locks on the file system."""
    DIRSYNC = 0x80
    """Do directory updates synchronously."""
    NOATIME = 0x400
    """Do not update file access times."""
    NODIRATIME = 0x800
    """Do not update directory access times."""
    BIND = 0x1000
    """Mount a subtree somewhere else."""
    RBIND = 0x1000 | _MS_REC
    """Mount a subtree and all its submounts somewhere else."""
    UNBINDABLE = 0x20000
    """Make a mount that cannot be cloned by a bind operation."""
    RUNBINDABLE = 0x20000 | _MS_REC
    """Mark the whole mount tree as unbindable."""
    PRIVATE = 0x40000
    """Make a mount that carries no propagation abilities."""
    RPRIVATE = 0x40000 | _MS_REC
    """Mark the whole mount tree as private."""
    SLAVE = 0x80000
    """Receive propagation from the master, but not the other way round."""
    RSLAVE = 0x80000 | _MS_REC
    """Mark the whole mount tree as slave."""
    SHARED = 0x100000
    """Propagate mounts and unmounts between all mirrors."""
    RSHARED = 0x100000 | _MS_REC
    """Mark the whole mount tree as shared."""
    RELATIME = 0x200000
    """Update access times relative to modify or change time."""
    STRICTATIME = 0x1000000
    """Always update access times."""


class _Option(NamedTuple):
    clear: bool
    flag: int


_FLAGS: Dict[str, _Option] = {
    "defaults": _Option(False, 0),
    "ro": _Option(False, MountFlag.RDONLY),
    "rw": _Option(True, MountFlag.RDONLY),
    "suid": _Option(True, MountFlag.NOSUID),
    "nosuid": _Option(False, MountFlag.NOSUID),
    "dev": _Option(True, MountFlag.NODEV),
    "nodev": _Option(False, MountFlag.NODEV),
    "exec": _Option(True, MountFlag.NOEXEC),
    "noexec": _Option(False, MountFlag.NOEXEC),
    "sync": _Option(False, MountFlag.SYNCHRONOUS),
    "async": _Option(True, MountFlag.SYNCHRONOUS),
    "dirsync": _Option(False, MountFlag.DIRSYNC),
    "remount": _Option(False, MountFlag.REMOUNT),
    "mand": _Option(False, MountFlag.MANDLOCK),
    "nomand": _Option(True, MountFlag.MANDLOCK),
    "atime": _Option(True, MountFlag.NOATIME),
    "noatime": _Option(False, MountFlag.NOATIME),
    "diratime": _Option(True, MountFlag.NODIRATIME),
    "nodiratime": _Option(False, MountFlag.NODIRATIME),
    "bind": _Option(False, MountFlag.BIND),
    "rbind": _Option(False, MountFlag.RBIND),
    "unbindable": _Option(False, MountFlag.UNBINDABLE),
    "runbindable": _Option(False, MountFlag.RUNBINDABLE),
    "private": _Option(False, MountFlag.PRIVATE),
    "rprivate": _Option(False, MountFlag.RPRIVATE),
    "shared": _Option(False, MountFlag.SHARED),
    "rshared": _Option(False, MountFlag.RSHARED),
    "slave": _Option(False, MountFlag.SLAVE),
    "rslave": _Option(False, MountFlag.RSLAVE),
    "relatime": _Option(False, MountFlag.RELATIME),
    "norelatime": _Option(True, MountFlag.RELATIME),
    "strictatime": _Option(False, MountFlag.STRICTATIME),
    "nostrictatime": _Option(True, MountFlag.STRICTATIME),
}

_VALID_DATA_KEYS = frozenset(
    {"", "size", "mode", "uid", "gid", "nr_inodes", "nr_blocks", "mpol"}
)

_PROPAGATION = frozenset(
    {
        "bind",
        "rbind",
        "unbindable",
        "runbindable",
        "private",
        "rprivate",
        "shared",
        "rshared",
        "slave",
        "rslave",
    }
)

# All propagation options share one slot: only the last one given counts.
_PROPAGATION_KEY = -1


def _show_parts(parts: List[str]) -> str:
    return "[" + " ".join(f'"{part}"' for part in parts) + "]"


def merge_tmpfs_options(options: Iterable[str]) -> List[str]:
    """Drop overridden tmpfs options, keeping the last of each kind in order.

    Raises ``ValueError`` for an option that is neither a known flag nor a
    ``key=value`` pair with a recognised key.
    """
    seen_flags = set()
    seen_data = set()
    merged: List[str] = []

    for option in reversed(list(options)):
        if option == "defaults":
            continue
        known = _FLAGS.get(option)
        if known is not None and known.flag != 0:
            key = _PROPAGATION_KEY if option in _PROPAGATION else known.flag
            if key not in seen_flags:
                merged.append(option)
                seen_flags.add(key)
            continue
        parts = option.split("=", 1)
        if len(parts) != 2 or parts[0] not in _VALID_DATA_KEYS:
            raise ValueError(f"invalid tmpfs option {_show_parts(parts)}")
        if parts[0] not in seen_data:
            merged.append(option)
            seen_data.add(parts[0])

    merged.reverse()
    return merged


def parse_options(options: str) -> Tuple[int, str]:
    """Split ``"opt1,opt2=val"`` into mount(2) flags and file-system data."""
    flag = 0
    data: List[str] = []
    for option in options.split(","):
        known = _FLAGS.get(option)
        if known is not None and known.flag != 0:
            if known.clear:
                flag &= ~int(known.flag)
            else:
                flag |= int(known.flag)
        else:
            data.append(option)
    return flag, ",".join(data)