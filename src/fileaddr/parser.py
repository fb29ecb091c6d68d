"""Parser facade: resolve a source, resolve a target, copy between them."""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

from .core.copier import DEFAULT_CHUNK_SIZE, copy_stream
from .core.errors import ErrCode
from .core.model import BytesResult, FileType
from .core.options import SourceOption, TargetOption
from .core.registry import SignatureRegistry
from .io import HttpTransport, open_local_writer, open_source, write_target
from .io.http_async import copy_http_source_async
from .io.uri import HTTP_SCHEMES, is_data_uri, parse_uri

LOGGER = logging.getLogger(__name__)

SourceLike = Union[str, SourceOption]


def _as_source(source: SourceLike) -> SourceOption:
    return source if isinstance(source, SourceOption) else SourceOption(uri=source)


class Parser:
    """Copies byte streams between URI-addressed endpoints, accepting only
    streams whose leading bytes match a registered signature.

    The registry and transport belong to this instance. Neither is guarded by
    a lock: concurrent copies are fine, concurrent registry edits are not.
    """

    def __init__(
        self,
        *support_types: str,
        transport: Optional[HttpTransport] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.registry = SignatureRegistry(support_types)
        self.transport = transport or HttpTransport()
        self.chunk_size = chunk_size

    # --- registry ---
    @property
    def support_types(self) -> frozenset[FileType]:
        return frozenset(self.registry)

    def add_support_types(self, *support_types: str) -> None:
        self.registry.add(*support_types)

    def del_support_types(self, *support_types: str) -> None:
        self.registry.remove(*support_types)

    def _require_types(self) -> None:
        if not len(self.registry):
            raise ErrCode.NO_SUPPORT_FILE_TYPES.error("no supported file types are configured")

    # --- copy ---
    def copy(self, reader: Optional[BinaryIO], writer: Optional[BinaryIO]) -> FileType:
        """Copy ``reader`` into ``writer`` if its signature is registered."""
        return copy_stream(self.registry, reader, writer, chunk_size=self.chunk_size)

    def copy_by_uri(self, src_uri: str, target_uri: str) -> FileType:
        return self.copy_with_option(SourceOption(uri=src_uri), TargetOption(uri=target_uri))

    def copy_to_path(self, src_uri: str, path: Union[str, Path]) -> FileType:
        """Copy ``src_uri`` into a local file path.

        ``path`` is used verbatim, so ``#`` and ``?`` are ordinary file name
        characters here.
        """
        with open_local_writer(Path(path).absolute()) as writer:
            return self.copy_with_option(SourceOption(uri=src_uri), TargetOption(writer=writer))

    def copy_with_option(self, source: SourceOption, target: TargetOption) -> FileType:
        self._require_types()
        with open_source(source, self.transport) as reader:
            file_type = write_target(target, reader, self.copy, self.transport)
        LOGGER.debug("Copied %r to %r as %s", source, target, file_type or "<any>")
        return file_type

    def copy_to_bytes(self, src_uri: str) -> Tuple[FileType, BytesResult]:
        return self.copy_to_bytes_with_option(SourceOption(uri=src_uri))

    def copy_to_bytes_with_option(self, source: SourceOption) -> Tuple[FileType, BytesResult]:
        """Copy a source into memory; the result exposes ``hex()`` and ``base64()``."""
        self._require_types()
        buf = io.BytesIO()
        with open_source(source, self.transport) as reader:
            file_type = self.copy(reader, buf)
        return file_type, BytesResult(buf.getvalue())

    async def copy_to_bytes_async(self, source: SourceLike) -> Tuple[FileType, BytesResult]:
        """Async ``copy_to_bytes``: http(s) sources stream through httpx, others
        run the blocking path in a worker thread."""
        option = _as_source(source)
        self._require_types()
        if option.reader is None and option.uri and not is_data_uri(option.uri):
            resolved = parse_uri(option.uri)
            if resolved.scheme in HTTP_SCHEMES:
                buf = io.BytesIO()
                file_type = await copy_http_source_async(
                    resolved.location, option.http_option(), self.registry, buf, self.transport
                )
                return file_type, BytesResult(buf.getvalue())
        return await asyncio.to_thread(self.copy_to_bytes_with_option, option)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"Parser({list(self.registry)!r})"
