"""Incremental multipart/form-data encoder."""

from __future__ import annotations

from typing import BinaryIO, Optional

from urllib3.fields import RequestField
from urllib3.filepost import choose_boundary


class _PartWriter:
    """File-like view over the body of the part currently being written."""

    def __init__(self, owner: "MultipartWriter"):
        self._owner = owner

    def write(self, data: bytes) -> int:
        if self._owner._current is not self:
            raise ValueError("multipart part is already finished")
        self._owner._out.write(data)
        return len(data)


class MultipartWriter:
    """Write multipart/form-data parts straight into ``out`` as they are produced.

    Mirrors ``urllib3.encode_multipart_formdata`` but never holds a whole part
    in memory: a file part is opened with :meth:`create_form_file` and its
    content is streamed through the returned writer.
    """

    def __init__(self, out: BinaryIO, boundary: Optional[str] = None):
        self._out = out
        self.boundary = boundary or choose_boundary()
        self._current: Optional[_PartWriter] = None
        self._started = False
        self._closed = False

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def _open_part(self, field: RequestField) -> _PartWriter:
        if self._closed:
            raise ValueError("multipart writer is closed")
        if self._started:
            self._out.write(b"\r\n")
        self._out.write(f"--{self.boundary}\r\n".encode("latin-1"))
        self._out.write(field.render_headers().encode("utf-8"))
        self._started = True
        self._current = _PartWriter(self)
        return self._current

    def write_field(self, name: str, value: str) -> None:
        field = RequestField(name=name, data=value)
        field.make_multipart()
        self._open_part(field).write(value.encode("utf-8"))

    def create_form_file(self, field_name: str, filename: str) -> _PartWriter:
        field = RequestField(name=field_name, data=b"", filename=filename)
        field.make_multipart(content_type="application/octet-stream")
        return self._open_part(field)

    def close(self) -> None:
        """Write the closing boundary; safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._current = None
        if self._started:
            self._out.write(b"\r\n")
        self._out.write(f"--{self.boundary}--\r\n".encode("latin-1"))
