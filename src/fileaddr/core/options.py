"""Per-call source/target options and the HTTP option resolver."""

from __future__ import annotations

from typing import Any, BinaryIO, Dict, List, Optional, Type, TypeVar, Union

from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_pascal

from .errors import ErrCode


class HttpOptionModel(BaseModel):
    """Shared configuration for HTTP option models.

    JSON keys may be snake_case (``field_name``) or PascalCase
    (``FieldName``); any other key is rejected.
    """

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=AliasGenerator(validation_alias=lambda name: AliasChoices(name, to_pascal(name))),
    )

    @field_validator("headers", mode="before", check_fields=False)
    @classmethod
    def _join_header_values(cls, value: Any) -> Any:
        # {"X-Tag": ["a", "b"]} is sent as "X-Tag: a, b"
        if isinstance(value, dict):
            return {k: ", ".join(v) if isinstance(v, list) else v for k, v in value.items()}
        return value


class SourceHttpOption(HttpOptionModel):
    """How to request an http(s) source.

    Attributes:
        method: Request method, upper-cased; empty means GET.
        headers: Extra request headers.
        form: Form values, sent as query parameters.
        req_body: Raw request body; omitted when empty.
    """

    method: str = "GET"
    headers: Dict[str, str] = {}
    form: Dict[str, Union[str, List[str]]] = {}
    req_body: str = ""

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, value: str) -> str:
        return value.strip().upper() or "GET"


class TargetHttpOption(HttpOptionModel):
    """How to upload to an http(s) target as multipart/form-data.

    Attributes:
        method: Request method, upper-cased; empty means POST.
        field_name: Multipart field carrying the file.
        filename: File name sent with the part; empty means the last path
            segment of the target URI.
        headers: Extra request headers. Content-Type is always replaced by
            the multipart boundary header.
        form: Static form fields written before the file part.

    JSON payloads use either key form, e.g. ``{"field_name": "doc"}`` or
    ``{"FieldName": "doc", "Method": "PUT"}``.
    """

    method: str = "POST"
    field_name: str = "file"
    filename: str = ""
    headers: Dict[str, str] = {}
    form: Dict[str, str] = {}

    @field_validator("method")
    @classmethod
    def _normalize_method(cls, value: str) -> str:
        return value.strip().upper() or "POST"

    @field_validator("field_name")
    @classmethod
    def _default_field_name(cls, value: str) -> str:
        return value or "file"


M = TypeVar("M", bound=HttpOptionModel)

# Payload shapes accepted for an HTTP option: nothing, the model itself,
# or its JSON encoding as text or bytes.
OptionPayload = Union[None, HttpOptionModel, str, bytes, bytearray]


def _from_json_text(text: str, model: Type[M]) -> M:
    try:
        return model.model_validate_json(text)
    except ValidationError as exc:
        raise ErrCode.INVALID_OPTION.error(f"failed to parse option content: {exc}", exc) from exc


def _from_json_bytes(data: bytes, model: Type[M]) -> M:
    try:
        return model.model_validate_json(bytes(data))
    except ValidationError as exc:
        raise ErrCode.INVALID_OPTION.error(f"failed to parse option content: {exc}", exc) from exc


def resolve_option(data: Any, model: Type[M]) -> Optional[M]:
    """Normalize an option payload into ``model``; None means use defaults."""
    if data is None:
        return None
    if isinstance(data, model):
        return data
    if isinstance(data, str):
        return _from_json_text(data, model)
    if isinstance(data, (bytes, bytearray)):
        return _from_json_bytes(data, model)
    raise ErrCode.INVALID_OPTION.error(f"unrecognized option content: {type(data).__name__}")


class _CommonOption:
    def __init__(self, uri: str = "", data: OptionPayload = None) -> None:
        self.uri = uri
        self.data = data

    def set_uri(self, uri: str):
        self.uri = uri
        return self


class SourceOption(_CommonOption):
    """Where to read from: a pre-opened ``reader`` wins over ``uri``."""

    def __init__(self, uri: str = "", data: OptionPayload = None, reader: BinaryIO | None = None) -> None:
        super().__init__(uri, data)
        self.reader = reader

    def set_reader(self, reader: BinaryIO) -> "SourceOption":
        self.reader = reader
        return self

    def http_option(self) -> SourceHttpOption:
        return resolve_option(self.data, SourceHttpOption) or SourceHttpOption()

    def __repr__(self) -> str:
        return f"SourceOption(uri={self.uri!r}, reader={self.reader!r})"


class TargetOption(_CommonOption):
    """Where to write to: a pre-opened ``writer`` wins over ``uri``."""

    def __init__(self, uri: str = "", data: OptionPayload = None, writer: BinaryIO | None = None) -> None:
        super().__init__(uri, data)
        self.writer = writer

    def set_writer(self, writer: BinaryIO) -> "TargetOption":
        self.writer = writer
        return self

    def http_option(self) -> TargetHttpOption:
        return resolve_option(self.data, TargetHttpOption) or TargetHttpOption()

    def __repr__(self) -> str:
        return f"TargetOption(uri={self.uri!r}, writer={self.writer!r})"
