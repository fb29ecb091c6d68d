"""Tests for HTTP option resolution."""

import json

import pytest
from pydantic import ValidationError

from fileaddr.core.errors import ErrCode, FileAddrError
from fileaddr.core.options import (
    SourceHttpOption,
    SourceOption,
    TargetHttpOption,
    TargetOption,
    resolve_option,
)


class TestResolveOption:
    """Test each accepted payload representation."""

    def test_none_means_defaults(self):
        """None resolves to None so callers fall back to defaults."""
        assert resolve_option(None, SourceHttpOption) is None

    def test_model_instance_passthrough(self):
        """An instance of the expected model is used as-is."""
        opt = SourceHttpOption(method="post")
        assert resolve_option(opt, SourceHttpOption) is opt

    def test_json_text(self):
        """A JSON string is decoded into the model."""
        payload = json.dumps({"method": "put", "headers": {"X-Token": "t"}, "req_body": "hi"})
        opt = resolve_option(payload, SourceHttpOption)

        assert opt.method == "PUT"
        assert opt.headers == {"X-Token": "t"}
        assert opt.req_body == "hi"

    def test_json_bytes(self):
        """A JSON byte payload is decoded into the model."""
        payload = json.dumps({"field_name": "doc", "form": {"a": "1"}}).encode()
        opt = resolve_option(payload, TargetHttpOption)

        assert opt.method == "POST"
        assert opt.field_name == "doc"
        assert opt.form == {"a": "1"}

    @pytest.mark.parametrize("payload", ["{not json", b"[1, 2]", '{"unknown": 1}'])
    def test_invalid_json(self, payload):
        """Malformed or mismatched JSON is an invalid option wrapping the parse error."""
        with pytest.raises(FileAddrError) as exc_info:
            resolve_option(payload, SourceHttpOption)

        assert ErrCode.INVALID_OPTION.matches(exc_info.value)
        assert isinstance(exc_info.value.raw_err, ValidationError)

    @pytest.mark.parametrize("payload", [{"method": "GET"}, 42, ["GET"], TargetHttpOption()])
    def test_unrecognized_shape(self, payload):
        """Any other shape, including the wrong model, is rejected."""
        with pytest.raises(FileAddrError, match="unrecognized option content") as exc_info:
            resolve_option(payload, SourceHttpOption)
        assert ErrCode.INVALID_OPTION.matches(exc_info.value)


class TestHttpOptionModels:
    """Test model defaults and normalisation."""

    def test_source_defaults(self):
        """Source requests default to a bare GET."""
        opt = SourceHttpOption()
        assert opt.method == "GET"
        assert opt.headers == {}
        assert opt.form == {}
        assert opt.req_body == ""

    def test_target_defaults(self):
        """Uploads default to POST with a 'file' field."""
        opt = TargetHttpOption()
        assert opt.method == "POST"
        assert opt.field_name == "file"
        assert opt.filename == ""

    def test_empty_values_fall_back(self):
        """Empty method and field name fall back to defaults."""
        assert SourceHttpOption(method="").method == "GET"
        assert TargetHttpOption(method=" ", field_name="").method == "POST"
        assert TargetHttpOption(field_name="").field_name == "file"

    def test_method_upper_cased(self):
        """Methods are upper-cased."""
        assert TargetHttpOption(method="put").method == "PUT"


class TestSourceTargetOption:
    """Test the per-call option holders."""

    def test_fluent_setters(self):
        """Setters return the option for chaining."""
        src = SourceOption().set_uri("file:///tmp/a.pdf")
        assert src.uri == "file:///tmp/a.pdf"

        dst = TargetOption(data='{"field_name": "doc"}').set_uri("http://host/up")
        assert dst.uri == "http://host/up"
        assert dst.http_option().field_name == "doc"

    def test_http_option_defaults(self):
        """Without data the default model is produced."""
        assert SourceOption(uri="http://host/x").http_option() == SourceHttpOption()
        assert TargetOption(uri="http://host/x").http_option() == TargetHttpOption()

    def test_http_option_invalid(self):
        """Invalid payloads surface when the option is resolved."""
        with pytest.raises(FileAddrError) as exc_info:
            SourceOption(uri="http://host/x", data=3.14).http_option()
        assert ErrCode.INVALID_OPTION.matches(exc_info.value)


class TestOptionKeys:
    """Test the accepted JSON key forms."""

    def test_pascal_case_keys(self):
        """PascalCase keys resolve to the same fields as snake_case keys."""
        payload = json.dumps({"Method": "put", "FieldName": "doc", "Filename": "a.pdf", "Form": {"k": "v"}})
        opt = resolve_option(payload, TargetHttpOption)

        assert opt == TargetHttpOption(method="PUT", field_name="doc", filename="a.pdf", form={"k": "v"})

        src = resolve_option(b'{"Method": "post", "ReqBody": "x"}', SourceHttpOption)
        assert (src.method, src.req_body) == ("POST", "x")

    def test_multi_value_headers(self):
        """Header values given as lists are joined into one header."""
        opt = resolve_option('{"Headers": {"Accept": ["a/b", "c/d"], "X-Token": "t"}}', SourceHttpOption)
        assert opt.headers == {"Accept": "a/b, c/d", "X-Token": "t"}

    @pytest.mark.parametrize("payload", ['{"fieldName": "doc"}', '{"FIELD_NAME": "doc"}'])
    def test_other_key_forms_rejected(self, payload):
        """Only snake_case and PascalCase keys are recognised."""
        with pytest.raises(FileAddrError) as exc_info:
            resolve_option(payload, TargetHttpOption)
        assert ErrCode.INVALID_OPTION.matches(exc_info.value)
