"""I/O layer for fileaddr - turns source/target options into streams."""

from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from typing import BinaryIO, Iterator

from ..core.errors import ErrCode
from ..core.model import FileType
from ..core.options import SourceOption, TargetOption
from .http_sync import Copier, HttpTransport, open_http_reader, upload_multipart
from .local import LocalFileWriter, open_local_reader, open_local_writer
from .uri import HTTP_SCHEMES, ResolvedURI, decode_data_uri, is_data_uri, parse_uri

LOGGER = logging.getLogger(__name__)


@contextmanager
def open_source(option: SourceOption, transport: HttpTransport) -> Iterator[BinaryIO]:
    """Yield a readable stream for ``option``; whatever was opened is closed on exit."""
    if option.reader is not None:
        yield option.reader
        return

    if not option.uri:
        raise ErrCode.UNSUPPORTED_PROTOCOL.error("empty address is not supported")

    if is_data_uri(option.uri):
        yield io.BytesIO(decode_data_uri(option.uri))
        return

    resolved = parse_uri(option.uri)
    LOGGER.debug("Reading %s source %s", resolved.scheme, resolved.location)
    if resolved.scheme in HTTP_SCHEMES:
        with open_http_reader(resolved.location, option.http_option(), transport) as reader:
            yield reader
    else:
        with open_local_reader(resolved.location) as reader:
            yield reader


def resolve_target(option: TargetOption) -> ResolvedURI:
    """Classify the URI of a target that has no pre-opened writer."""
    if not option.uri:
        raise ErrCode.UNSUPPORTED_PROTOCOL.error("empty address is not supported")
    if is_data_uri(option.uri):
        raise ErrCode.UNSUPPORTED_PROTOCOL.error("writing to a data URI is not supported")
    return parse_uri(option.uri)


def write_target(
    option: TargetOption,
    reader: BinaryIO,
    copier: Copier,
    transport: HttpTransport,
) -> FileType:
    """Copy ``reader`` into the endpoint described by ``option``."""
    if option.writer is not None:
        return copier(reader, option.writer)

    resolved = resolve_target(option)
    LOGGER.debug("Writing %s target %s", resolved.scheme, resolved.location)
    if resolved.scheme in HTTP_SCHEMES:
        return upload_multipart(resolved.location, reader, option.http_option(), copier, transport)
    with open_local_writer(resolved.location) as writer:
        return copier(reader, writer)


__all__ = [
    "HttpTransport",
    "LocalFileWriter",
    "open_source",
    "resolve_target",
    "write_target",
    "open_local_reader",
    "open_local_writer",
    "open_http_reader",
    "upload_multipart",
]
