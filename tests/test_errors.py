import errno

import pytest

from mountkit.errors import MountError
from mountkit.flags import MNT_DETACH, MountFlag


def test_message_with_all_fields():
    error = MountError(
        "mount", "/mnt", ValueError("boom"),
        source="/dev/sda", flags=int(MountFlag.BIND), data="size=1k",
    )
    assert str(error) == "mount /dev/sda:/mnt, flags: 0x1000, data: size=1k: boom"


def test_message_without_source():
    error = MountError("umount", "/mnt", ValueError("boom"), flags=MNT_DETACH)
    text = str(error)
    assert text.startswith("umount /mnt, flags: 0x")
    assert ":" not in text.split(",")[0]
    assert text.endswith(": boom")


def test_zero_flags_and_empty_data_omitted():
    text = str(MountError("remount", "/target", ValueError("bad")))
    assert "flags" not in text
    assert "data" not in text
    assert text == "remount /target: bad"


def test_cause_and_unwrap():
    inner = ValueError("inner")
    error = MountError("mount", "/mnt", inner)
    assert error.cause is inner
    assert error.__cause__ is inner


def test_errno_carried_over():
    inner = OSError(errno.ENOENT, "No such file or directory")
    error = MountError("umount", "/gone", inner, flags=MNT_DETACH)
    assert isinstance(error, OSError)
    assert error.errno == errno.ENOENT


def test_can_be_caught_as_oserror():
    with pytest.raises(OSError) as info:
        raise MountError("mount", "/mnt", OSError(errno.EINVAL, "Invalid argument"))
    assert info.value.errno == errno.EINVAL
    assert info.value.op == "mount"
    assert info.value.target == "/mnt"