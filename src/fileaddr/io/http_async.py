"""Asynchronous HTTP source reads using httpx."""

from __future__ import annotations

import logging
from typing import AsyncIterator, BinaryIO

import httpx

from ..core.copier import write_chunk
from ..core.errors import ErrCode
from ..core.model import FileType
from ..core.options import SourceHttpOption
from ..core.registry import SignatureRegistry
from ..core.util import PROBE_SIZE, to_hex
from .http_sync import HttpTransport, check_status

LOGGER = logging.getLogger(__name__)


def _async_client(transport: HttpTransport) -> httpx.AsyncClient:
    """Build a short-lived async client mirroring the transport configuration."""
    return httpx.AsyncClient(verify=transport.verify, timeout=transport.timeout, follow_redirects=True)


async def copy_chunks(registry: SignatureRegistry, chunks: AsyncIterator[bytes], writer: BinaryIO) -> FileType:
    """Async counterpart of ``copy_stream`` over an iterator of body chunks."""
    head = bytearray()
    iterator = chunks.__aiter__()
    exhausted = False
    while len(head) < PROBE_SIZE:
        try:
            chunk = await iterator.__anext__()
        except StopAsyncIteration:
            exhausted = True
            break
        except httpx.HTTPError as exc:
            raise ErrCode.PROTO_FILE_READ.error(f"failed to read source content: {exc}", exc) from exc
        head.extend(chunk)

    head_hex = to_hex(bytes(head))
    file_type = registry.match(head_hex)
    if file_type is None:
        raise ErrCode.UNSUPPORTED_FILE_TYPE.error(f"unsupported source file type: {head_hex or '<empty>'}")

    write_chunk(writer, bytes(head))
    if exhausted:
        return file_type
    while True:
        try:
            chunk = await iterator.__anext__()
        except StopAsyncIteration:
            break
        except httpx.HTTPError as exc:
            raise ErrCode.PROTO_FILE_READ.error(f"failed to read source content: {exc}", exc) from exc
        write_chunk(writer, chunk)
    return file_type


async def copy_http_source_async(
    url: str,
    option: SourceHttpOption,
    registry: SignatureRegistry,
    writer: BinaryIO,
    transport: HttpTransport,
) -> FileType:
    """Stream an http(s) source into ``writer`` without blocking the event loop."""
    async with _async_client(transport) as client:
        try:
            request = client.build_request(
                option.method,
                url,
                headers=dict(option.headers),
                params=dict(option.form) or None,
                content=option.req_body or None,
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as exc:
            raise ErrCode.HTTP_REQUEST_CREATE.error(f"failed to create http request: {exc}", exc) from exc

        LOGGER.debug("%s %s (async)", option.method, url)
        try:
            response = await client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ErrCode.HTTP_REQUEST.error(f"http request failed: {exc}", exc) from exc
        try:
            check_status(response.status_code, url)
            return await copy_chunks(registry, response.aiter_bytes(), writer)
        finally:
            await response.aclose()
