from __future__ import annotations
from typing import Any, Dict

from .errors import FileAddrError, parse_error

PROBE_SIZE = 10   # bytes sniffed before a stream is accepted


def to_hex(data: bytes | None, *, limit: int = PROBE_SIZE) -> str:
    """Lowercase hex of at most ``limit`` leading bytes (empty for no data)."""
    if not data:
        return ""
    return data[:limit].hex()


def error_asdict(err: BaseException) -> Dict[str, Any]:
    """Return a JSON-serialisable description of a failed operation."""
    parsed: FileAddrError | None = parse_error(err)
    if parsed is None:
        return {"success": False, "error": str(err), "code": None}
    return {"success": False, "error": parsed.msg, "code": parsed.code.name}
