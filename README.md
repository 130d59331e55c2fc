# mountkit

Read the mount table of the current process, tell whether a path is a mount
point, and work with mount option strings as `mount(8)` and `fstab(5)` write
them.

mountkit needs only the standard library. The mount table is read from
`/proc`, so the functions that read it work on Linux only.

## Install

```
pip install mountkit
```

## Reading the mount table

```python
from mountkit.info import get_mounts, prefix_filter, fs_type_filter

for entry in get_mounts(prefix_filter("/sys")):
    print(entry.mountpoint, entry.fstype, entry.source)

tmpfs_mounts = get_mounts(fs_type_filter("tmpfs", "devtmpfs"))
```

`get_mounts` reads `/proc/thread-self/mountinfo` where it exists, and
otherwise the per-task or per-process table. Each entry is an `Info`
dataclass with the fields of one mountinfo line: `id`, `parent`, `major`,
`minor`, `root`, `mountpoint`, `options`, `optional`, `fstype`, `source` and
`vfs_options`. Escaped characters in the root, mount point, file system type
and source (`\040` for a space, `\011` for a tab, `\012` for a newline,
`\134` for a backslash) are decoded. `unescape` does the same for a single
value and raises `ValueError` on a malformed escape.

A filter is a callable that takes an `Info` and returns a `(skip, stop)` pair:
`skip` drops the entry, `stop` ends reading after it. The package provides:

- `prefix_filter(prefix)`: keeps mount points equal to or below `prefix`,
  counting whole path components, so `/foo` matches `/foo/bar` but not
  `/foobar`. The prefix must be a clean path without a trailing slash.
- `single_entry_filter(mp)`: keeps the first entry whose mount point is `mp`
  and then stops reading.
- `parents_filter(path)`: keeps the mount points that are string prefixes of
  `path`, i.e. that could be its parents.
- `fs_type_filter(*types)`: keeps entries with one of the given file system
  types.

To parse mountinfo data from elsewhere, such as a saved copy, pass any file
object or iterable of lines (text or bytes) to
`get_mounts_from_reader(reader, filter)`. `pid_mount_info(pid)` returns the
table of another process. A line in the wrong form raises `ValueError`.

## Is this path a mount point?

```python
from mountkit.mounted import mounted, mounted_fast

mounted("/proc")                  # True
is_mount, sure = mounted_fast("/home/user")
```

Paths are first made absolute with symlinks resolved (`normalize_path`);
`/` is always a mount point. `mounted_fast` compares the device number of the
path with that of its parent (`mounted_by_stat`) and never reads the mount
table. Because this check cannot see bind mounts, it only reports
`sure=True` for a positive answer. `mounted` uses the same check and, when it
is not certain, looks the path up in the mount table
(`mounted_by_mountinfo`). A path that does not exist raises
`FileNotFoundError`.

## Mount options

```python
from mountkit.flags import MountFlag, parse_options, merge_tmpfs_options

flags, data = parse_options("noatime,ro,noexec,size=10k")
assert flags == MountFlag.NOATIME | MountFlag.RDONLY | MountFlag.NOEXEC
assert data == "size=10k"

merge_tmpfs_options(["noatime", "ro", "size=10k", "atime", "size=1024k"])
# ['ro', 'atime', 'size=1024k']
```

`MountFlag` is an `IntFlag` with the Linux mount(2) flag values, including
the recursive propagation variants (`RBIND`, `RSHARED`, and so on);
`MNT_DETACH` holds the umount2(2) lazy-unmount flag.

`parse_options` splits a comma-separated option string into an integer of
flag bits and the data string left for the file system; options such as
`rw` or `exec` clear the bit that their counterpart sets.
`merge_tmpfs_options` removes duplicate and contradicting options, keeping
the last one of each kind in its original order; all propagation options
share one slot, and `defaults` is dropped. An option that is neither a known
flag nor a `key=value` pair with a tmpfs key (`size`, `mode`, `uid`, `gid`,
`nr_inodes`, `nr_blocks`, `mpol`) raises `ValueError`.

## Errors

`mountkit.errors.MountError` is an `OSError` that describes a failed mount or
unmount: the operation, source and target, flags, data and the underlying
error (also available as `cause`). It carries the `errno` of that error when
there is one, and prints as, for example,
`mount /dev/sda1:/mnt, flags: 0x1: ...`.

## What mountkit does not do

mountkit does not mount or unmount anything, and has no command-line tool.
It reads mount information and prepares flags and data strings; performing
the system calls is left to the caller.

## Tests

```
pip install -e ".[test]"
pytest
```