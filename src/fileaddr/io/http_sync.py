"""Synchronous HTTP endpoints using requests."""

from __future__ import annotations

import logging
import os
import posixpath
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import BinaryIO, Callable, Iterator, Optional
from urllib.parse import urlsplit

import requests
import urllib3

from ..core.errors import ErrCode, FileAddrError
from ..core.model import FILE_EMPTY, CopyResult, FileType
from ..core.options import SourceHttpOption, TargetHttpOption
from .multipart import MultipartWriter

LOGGER = logging.getLogger(__name__)

Copier = Callable[[BinaryIO, BinaryIO], FileType]

PIPE_CHUNK_SIZE = 64 * 1024


class HttpTransport:
    """HTTP client configuration owned by a Parser.

    TLS certificate verification is disabled by default so that self-signed
    endpoints are reachable; pass ``verify=True`` (or a CA bundle path) where
    transport security matters. ``timeout`` of None waits indefinitely.
    """

    def __init__(
        self,
        *,
        verify: bool | str = False,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.verify = verify
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.verify = verify
        if verify is False:
            LOGGER.warning("TLS certificate verification is disabled for outbound requests")

    def send(self, request: requests.Request, *, stream: bool = False) -> requests.Response:
        """Prepare and dispatch ``request``, mapping failures to FileAddrError."""
        try:
            prepared = self.session.prepare_request(request)
        except (requests.RequestException, ValueError) as exc:
            raise ErrCode.HTTP_REQUEST_CREATE.error(f"failed to create http request: {exc}", exc) from exc
        try:
            return self.session.send(prepared, stream=stream, verify=self.verify, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ErrCode.HTTP_REQUEST.error(f"http request failed: {exc}", exc) from exc

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def check_status(status_code: int, url: str) -> None:
    """Raise unless ``status_code`` is 2xx; 404 means the resource is missing."""
    if 200 <= status_code <= 299:
        return
    if status_code == 404:
        raise ErrCode.PROTO_FILE_NO_EXIST.error(f"http resource [{url}] does not exist")
    raise ErrCode.RES_STATUS_CODE.error(f"invalid http status code: {status_code}")


class HTTPBodyReader:
    """Readable view over a streamed response body with decoded content."""

    def __init__(self, response: requests.Response):
        self._raw = response.raw

    def read(self, size: int = -1) -> bytes:
        amt = None if size is None or size < 0 else size
        try:
            return self._raw.read(amt, decode_content=True)
        except (urllib3.exceptions.HTTPError, requests.RequestException) as e:
            raise IOError(f"http body read failed: {e}")


@contextmanager
def open_http_reader(url: str, option: SourceHttpOption, transport: HttpTransport) -> Iterator[HTTPBodyReader]:
    """Request ``url`` and yield its body; the response is closed on exit."""
    request = requests.Request(
        method=option.method,
        url=url,
        headers=dict(option.headers),
        params=dict(option.form) or None,
        data=option.req_body or None,
    )
    LOGGER.debug("%s %s", option.method, url)
    response = transport.send(request, stream=True)
    with response:
        check_status(response.status_code, url)
        yield HTTPBodyReader(response)


def default_filename(url: str) -> str:
    return posixpath.basename(urlsplit(url).path)


def _iter_pipe(pipe_r: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = pipe_r.read1(chunk_size)
        if not chunk:
            return
        yield chunk


def _close_quietly(stream: BinaryIO) -> None:
    try:
        stream.close()
    except OSError as exc:
        LOGGER.debug("Ignoring error while closing upload pipe: %s", exc)


def _produce_multipart(
    pipe_w: BinaryIO,
    writer: MultipartWriter,
    reader: BinaryIO,
    option: TargetHttpOption,
    copier: Copier,
) -> CopyResult:
    """Background half of an upload: encode the form and stream the file part."""
    try:
        try:
            for name, value in option.form.items():
                try:
                    writer.write_field(name, value)
                except OSError as exc:
                    raise ErrCode.TARGET_FILE_WRITE.error(f"failed to write form field [{name}]: {exc}", exc) from exc
            try:
                part = writer.create_form_file(option.field_name, option.filename)
            except OSError as exc:
                raise ErrCode.TARGET_FILE_WRITE.error(f"failed to create file part: {exc}", exc) from exc
            result = CopyResult(copier(reader, part))
        except FileAddrError as exc:
            result = CopyResult(FILE_EMPTY, exc)

        try:
            writer.close()
        except OSError as exc:
            if result.error is None:
                result = CopyResult(
                    FILE_EMPTY,
                    ErrCode.TARGET_FILE_WRITE.error(f"failed to finish multipart body: {exc}", exc),
                )
    finally:
        # end-of-body for the transport, on every path
        _close_quietly(pipe_w)
    return result


def upload_multipart(
    url: str,
    reader: BinaryIO,
    option: TargetHttpOption,
    copier: Copier,
    transport: HttpTransport,
) -> FileType:
    """Stream ``reader`` to ``url`` as a multipart/form-data upload.

    A background worker encodes the body into one end of an OS pipe while the
    request reads the other end, so the payload is never held in memory. The
    worker's Future is the single-slot result channel and is only waited on
    after the response arrives: the worker blocks on pipe writes until the
    transport drains them.
    """
    if not option.filename:
        option = option.model_copy(update={"filename": default_filename(url)})

    read_fd, write_fd = os.pipe()
    pipe_r = os.fdopen(read_fd, "rb")
    pipe_w = os.fdopen(write_fd, "wb")
    writer = MultipartWriter(pipe_w)

    headers = dict(option.headers)
    for key in [k for k in headers if k.lower() == "content-type"]:
        del headers[key]
    headers["Content-Type"] = writer.content_type

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="fileaddr-upload")
    try:
        future = executor.submit(_produce_multipart, pipe_w, writer, reader, option, copier)
        try:
            response = transport.send(
                requests.Request(
                    method=option.method,
                    url=url,
                    headers=headers,
                    data=_iter_pipe(pipe_r, PIPE_CHUNK_SIZE),
                ),
                stream=True,
            )
        except FileAddrError as exc:
            raise ErrCode.TARGET_FILE_WRITE.error(f"failed to send data to target: {exc.msg}", exc) from exc
        finally:
            # unblocks the worker if the transport stopped reading early
            _close_quietly(pipe_r)

        with response:
            status_code = response.status_code
        result = future.result()
    finally:
        executor.shutdown(wait=True)

    LOGGER.debug("Upload to %s finished with status %d", url, status_code)
    if not 200 <= status_code <= 299:
        raise ErrCode.TARGET_FILE_WRITE.error(f"server returned an invalid status code: {status_code}")
    return result.unwrap()
