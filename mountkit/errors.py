"""The error raised when a mount or unmount operation fails."""

from __future__ import annotations

from typing import Optional

__all__ = ["MountError"]


class MountError(OSError):
    """A failed mount-related system call, with the arguments it was given."""

    def __init__(
        self,
        op: str,
        target: str,
        err: BaseException,
        source: str = "",
        flags: int = 0,
        data: str = "",
    ) -> None:
        self.op = op
        self.target = target
        self.err = err
        self.source = source
        self.flags = flags
        self.data = data
        code: Optional[int] = getattr(err, "errno", None)
        if code is not None:
            super().__init__(code, str(err))
        else:
            super().__init__(str(err))
        self.__cause__ = err

    @property
    def cause(self) -> BaseException:
        """The underlying error."""
        return self.err

    def __str__(self) -> str:
        if self.source:
            where = f"{self.source}:{self.target}"
        else:
            where = self.target
        out = f"{self.op} {where}"
        if self.flags:
            out += f", flags: 0x{self.flags:x}"
        if self.data:
            out += f", data: {self.data}"
        return f"{out}: {self.err}"