"""URI classification for read and write endpoints."""

from __future__ import annotations

import base64
import binascii
import os
import re
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from ..core.errors import ErrCode

IS_WINDOWS = os.name == "nt"

# Matched before any percent-decoding so base64 payloads reach the decoder intact.
DATA_URI_RE = re.compile(
    r"^data:(?P<type>[\w.+-]+)/(?P<subtype>[\w.+-]+);(?P<encoding>[\w-]+),(?P<payload>.*)$",
    re.DOTALL,
)

HTTP_SCHEMES = ("http", "https")


@dataclass(frozen=True, slots=True)
class ResolvedURI:
    scheme: str      # "http", "https" or "file"
    location: str    # URL for http(s), filesystem path for file


def is_data_uri(uri: str) -> bool:
    return DATA_URI_RE.match(uri) is not None


def decode_data_uri(uri: str) -> bytes:
    """Decode the payload of an inline ``data:<type>/<subtype>;<encoding>,...`` URI."""
    m = DATA_URI_RE.match(uri)
    if m is None:
        raise ErrCode.UNSUPPORTED_PROTOCOL.error("unsupported data URI")

    encoding = m.group("encoding").lower()
    payload = m.group("payload")
    try:
        if encoding == "base64":
            return base64.b64decode(payload, validate=True)
        if encoding == "hex":
            return bytes.fromhex(payload)
    except (binascii.Error, ValueError) as exc:
        raise ErrCode.UNSUPPORTED_PROTOCOL.error(
            f"failed to decode {encoding} data URI content: {exc}", exc
        ) from exc
    raise ErrCode.UNSUPPORTED_PROTOCOL.error(f"unsupported data URI encoding: {encoding}")


def file_uri_path(netloc: str, path: str) -> str:
    """Join the host and path of a ``file`` URI into a local path."""
    local_path = os.path.join(netloc, path.lstrip("/")) if netloc else path
    if IS_WINDOWS:
        local_path = local_path.lstrip("/\\")
    return os.path.normpath(local_path) if local_path else local_path


def parse_uri(uri: str) -> ResolvedURI:
    """Percent-decode and classify ``uri``; data URIs must be handled first."""
    if not uri:
        raise ErrCode.UNSUPPORTED_PROTOCOL.error("empty address is not supported")

    decoded = unquote(uri)
    try:
        parts = urlsplit(decoded)
    except ValueError as exc:
        raise ErrCode.UNSUPPORTED_PROTOCOL.error(f"unsupported protocol: {exc}", exc) from exc

    scheme = parts.scheme.lower()
    if scheme in HTTP_SCHEMES:
        return ResolvedURI(scheme, decoded)
    if scheme == "file":
        local_path = file_uri_path(parts.netloc, parts.path)
        if not local_path:
            raise ErrCode.UNSUPPORTED_PROTOCOL.error(f"file URI without a path: {uri}")
        return ResolvedURI(scheme, local_path)
    raise ErrCode.UNSUPPORTED_PROTOCOL.error(f"unsupported protocol: {scheme or '<none>'}")
