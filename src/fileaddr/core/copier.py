"""Signature-gated stream copy."""

from __future__ import annotations

import logging
from typing import BinaryIO

from .errors import ErrCode, FileAddrError
from .model import FileType
from .registry import SignatureRegistry
from .util import PROBE_SIZE, to_hex

LOGGER = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def _read_probe(reader: BinaryIO) -> bytes:
    """Read up to PROBE_SIZE bytes; a short stream is accepted as-is."""
    buf = bytearray()
    while len(buf) < PROBE_SIZE:
        try:
            chunk = reader.read(PROBE_SIZE - len(buf))
        except (OSError, ValueError) as exc:
            raise ErrCode.PROTO_FILE_READ.error(f"failed to read source content: {exc}", exc) from exc
        if not chunk:
            break
        buf.extend(chunk)
    return bytes(buf)


def write_chunk(writer: BinaryIO, data: bytes) -> None:
    try:
        writer.write(data)
    except FileAddrError:
        # raised by writers that prepare their destination lazily
        raise
    except (OSError, ValueError) as exc:
        raise ErrCode.TARGET_FILE_WRITE.error(f"failed to write target content: {exc}", exc) from exc


def copy_stream(
    registry: SignatureRegistry,
    reader: BinaryIO | None,
    writer: BinaryIO | None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> FileType:
    """Sniff ``reader`` against ``registry`` and stream it into ``writer``.

    Nothing reaches ``writer`` unless the probed prefix matches a registered
    signature. Returns the matched FileType.
    """
    if reader is None:
        raise ErrCode.EMPTY_STREAM.error("source stream must not be empty")
    if writer is None:
        raise ErrCode.EMPTY_STREAM.error("target stream must not be empty")

    probe = _read_probe(reader)
    head_hex = to_hex(probe)

    file_type = registry.match(head_hex)
    if file_type is None:
        LOGGER.debug("Rejected stream with leading bytes %s", head_hex)
        raise ErrCode.UNSUPPORTED_FILE_TYPE.error(f"unsupported source file type: {head_hex or '<empty>'}")

    write_chunk(writer, probe)
    total = len(probe)
    while True:
        try:
            chunk = reader.read(chunk_size)
        except (OSError, ValueError) as exc:
            raise ErrCode.PROTO_FILE_READ.error(f"failed to read source content: {exc}", exc) from exc
        if not chunk:
            break
        write_chunk(writer, chunk)
        total += len(chunk)

    LOGGER.debug("Copied %d bytes of type %s", total, file_type or "<any>")
    return file_type
