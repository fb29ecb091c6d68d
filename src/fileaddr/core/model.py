from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Dict

from .errors import FileAddrError


class FileType(str):
    """Lowercase hex encoding of a binary signature prefix."""

    __slots__ = ()

    def matches(self, candidate_hex: str) -> bool:
        """Prefix test: True when this signature starts ``candidate_hex``."""
        return candidate_hex.startswith(self)


FILE_EMPTY = FileType("")
FILE_TYPE_PDF = FileType("255044462d312e")   # %PDF-1.
FILE_TYPE_PNG = FileType("89504e470d0a1a0a")
FILE_TYPE_JPEG = FileType("ffd8ff")
FILE_TYPE_GIF = FileType("47494638")        # GIF8
FILE_TYPE_ZIP = FileType("504b0304")

KNOWN_FILE_TYPES: Dict[str, FileType] = {
    "pdf": FILE_TYPE_PDF,
    "png": FILE_TYPE_PNG,
    "jpeg": FILE_TYPE_JPEG,
    "gif": FILE_TYPE_GIF,
    "zip": FILE_TYPE_ZIP,
}


class BytesResult(bytes):
    """Bytes captured by an in-memory copy; ``hex()`` is inherited from bytes."""

    def base64(self) -> str:
        return base64.b64encode(self).decode("ascii")


@dataclass(slots=True)
class CopyResult:
    file_type: FileType
    error: FileAddrError | None = None

    def unwrap(self) -> FileType:
        if self.error is not None:
            raise self.error
        return self.file_type
