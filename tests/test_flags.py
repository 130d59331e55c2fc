import pytest

from mountkit.flags import MountFlag, merge_tmpfs_options, parse_options


def test_mount_options_parsing():
    flag, data = parse_options("noatime,ro,noexec,size=10k")
    assert data == "size=10k"
    assert flag == MountFlag.NOATIME | MountFlag.RDONLY | MountFlag.NOEXEC


def test_merge_tmpfs_options():
    options = [
        "noatime", "ro", "size=10k", "defaults", "noexec", "atime",
        "defaults", "rw", "rprivate", "size=1024k", "slave", "exec",
    ]
    assert merge_tmpfs_options(options) == ["atime", "rw", "size=1024k", "slave", "exec"]


def test_merge_tmpfs_options_invalid():
    options = [
        "noatime", "ro", "size=10k", "atime", "rw", "rprivate",
        "size=1024k", "slave", "size", "exec",
    ]
    with pytest.raises(ValueError, match="invalid tmpfs option"):
        merge_tmpfs_options(options)


def test_merge_tmpfs_options_unknown_key():
    with pytest.raises(ValueError):
        merge_tmpfs_options(["bogus=1"])


def test_merge_keeps_single_propagation_mode():
    merged = merge_tmpfs_options(["shared", "private", "rslave"])
    assert merged == ["rslave"]


def test_merge_empty_key_is_valid():
    assert merge_tmpfs_options(["=x"]) == ["=x"]


def test_merge_only_defaults():
    assert merge_tmpfs_options(["defaults", "defaults"]) == []


def test_merge_is_idempotent():
    once = merge_tmpfs_options(["ro", "size=1k", "rw", "mode=755", "size=2k"])
    assert merge_tmpfs_options(once) == once


def test_clearing_option_cancels_flag():
    flag, data = parse_options("ro,rw")
    assert flag == 0
    assert data == ""


def test_later_set_after_clear():
    flag, _ = parse_options("exec,noexec")
    assert flag == MountFlag.NOEXEC


def test_defaults_goes_to_data():
    flag, data = parse_options("defaults,nodev")
    assert flag == MountFlag.NODEV
    assert data == "defaults"


def test_empty_options():
    assert parse_options("") == (0, "")


def test_rbind_includes_bind():
    flag, _ = parse_options("rbind")
    assert flag & MountFlag.BIND == MountFlag.BIND
    assert flag == MountFlag.RBIND


def test_unknown_options_kept_in_order():
    flag, data = parse_options("uid=1,bind,mode=700,gid=2")
    assert flag == MountFlag.BIND
    assert data == "uid=1,mode=700,gid=2"


@pytest.mark.parametrize(
    "option, value",
    [("ro", 1), ("remount", 32), ("bind", 4096), ("nosuid", 2), ("noexec", 8)],
)
def test_parsed_flag_values_match_linux(option, value):
    assert parse_options(option) == (value, "")