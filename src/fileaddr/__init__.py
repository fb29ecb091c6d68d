"""fileaddr - signature-checked byte copies between URI-addressed endpoints."""

from .core.errors import ErrCode, FileAddrError, parse_error                 # re-export
from .core.model import (
    BytesResult,
    CopyResult,
    FileType,
    FILE_EMPTY,
    FILE_TYPE_GIF,
    FILE_TYPE_JPEG,
    FILE_TYPE_PDF,
    FILE_TYPE_PNG,
    FILE_TYPE_ZIP,
    KNOWN_FILE_TYPES,
)
from .core.options import SourceHttpOption, SourceOption, TargetHttpOption, TargetOption
from .io import HttpTransport
from .parser import Parser


__all__ = [
    "Parser", "HttpTransport",
    "SourceOption", "TargetOption", "SourceHttpOption", "TargetHttpOption",
    "ErrCode", "FileAddrError", "parse_error",
    "FileType", "BytesResult", "CopyResult", "KNOWN_FILE_TYPES",
    "FILE_EMPTY", "FILE_TYPE_PDF", "FILE_TYPE_PNG", "FILE_TYPE_JPEG", "FILE_TYPE_GIF", "FILE_TYPE_ZIP",
]
