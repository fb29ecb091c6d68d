"""Local file endpoints."""

from __future__ import annotations

import logging
import os
import shutil
import stat
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from ..core.errors import ErrCode

LOGGER = logging.getLogger(__name__)


@contextmanager
def open_local_reader(path: Union[str, Path]) -> Iterator[BinaryIO]:
    """Open a regular file for reading; the file is closed on exit."""
    try:
        st = os.stat(path)
    except OSError as exc:
        raise ErrCode.PROTO_FILE_NO_EXIST.error(f"local file [{path}] does not exist", exc) from exc
    if stat.S_ISDIR(st.st_mode):
        raise ErrCode.PROTO_FILE_NO_EXIST.error(f"local file [{path}] does not exist")

    try:
        f = open(path, "rb")
    except OSError as exc:
        raise ErrCode.PROTO_FILE_OPEN.error(f"failed to open local file [{path}]: {exc}", exc) from exc
    with f:
        yield f


def _remove_stale(path: Path) -> None:
    """Best-effort removal of whatever currently occupies ``path``."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
    except OSError as exc:
        LOGGER.debug("Could not remove stale destination %s: %s", path, exc)


class LocalFileWriter:
    """Writable destination that is only created by the first write.

    Until then the destination is left untouched, so a stream rejected by the
    signature check never truncates or creates anything.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.bytes_written = 0
        self._file: Optional[BinaryIO] = None

    def _prepare(self) -> BinaryIO:
        _remove_stale(self.path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ErrCode.MKDIR.error(f"failed to create directory [{self.path.parent}]: {exc}", exc) from exc
        try:
            return open(self.path, "wb")
        except OSError as exc:
            raise ErrCode.MKFILE.error(f"failed to create target file [{self.path}]: {exc}", exc) from exc

    @property
    def opened(self) -> bool:
        return self._file is not None

    def write(self, data: bytes) -> int:
        if self._file is None:
            self._file = self._prepare()
        n = self._file.write(data)
        self.bytes_written += len(data)
        return n

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def open_local_writer(path: Union[str, Path]) -> LocalFileWriter:
    """Create a lazily-opened local file writer."""
    return LocalFileWriter(path)
