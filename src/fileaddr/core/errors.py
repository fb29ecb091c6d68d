"""Flat error taxonomy shared by every layer of fileaddr."""

from __future__ import annotations

from enum import IntEnum


class ErrCode(IntEnum):
    """Numeric error codes carried by :class:`FileAddrError`."""

    MKDIR = 1
    MKFILE = 2
    UNSUPPORTED_PROTOCOL = 3
    NO_SUPPORT_FILE_TYPES = 4
    PROTO_FILE_NO_EXIST = 5
    PROTO_FILE_OPEN = 6
    PROTO_FILE_READ = 7
    UNSUPPORTED_FILE_TYPE = 8
    TARGET_FILE_WRITE = 9
    HTTP_REQUEST_CREATE = 10
    HTTP_REQUEST = 11
    RES_STATUS_CODE = 12
    EMPTY_STREAM = 13
    INVALID_OPTION = 14

    def error(self, msg: str, raw_err: BaseException | None = None) -> "FileAddrError":
        """Build an error for this code, optionally wrapping the underlying cause."""
        return FileAddrError(self, msg, raw_err)

    def matches(self, err: BaseException | None) -> bool:
        """Return True when ``err`` is a FileAddrError carrying this code."""
        parsed = parse_error(err)
        if parsed is None:
            return False
        return parsed.has_code(self)


class FileAddrError(RuntimeError):
    """Raised for every failure of a copy operation."""

    def __init__(self, code: ErrCode, msg: str, raw_err: BaseException | None = None):
        super().__init__(msg)
        self.code = code
        self.msg = msg
        self.raw_err = raw_err

    def __str__(self) -> str:
        return self.msg

    def __repr__(self) -> str:
        return f"FileAddrError(code={self.code.name}, msg={self.msg!r})"

    def has_code(self, code: ErrCode) -> bool:
        return self.code == code


def parse_error(err: BaseException | None) -> FileAddrError | None:
    """Return ``err`` as a FileAddrError, or None for any other value."""
    if isinstance(err, FileAddrError):
        return err
    return None
