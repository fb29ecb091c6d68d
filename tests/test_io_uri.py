"""Tests for URI classification."""

import base64

import pytest

from fileaddr.core.errors import ErrCode, FileAddrError
from fileaddr.io.uri import decode_data_uri, file_uri_path, is_data_uri, parse_uri

PDF_HEAD = b"%PDF-1.4\n"


class TestDataURI:
    """Test inline data URI decoding."""

    def test_base64(self):
        """base64 payloads are decoded."""
        uri = "data:application/pdf;base64," + base64.b64encode(PDF_HEAD).decode()
        assert is_data_uri(uri)
        assert decode_data_uri(uri) == PDF_HEAD

    def test_base64_with_percent_sensitive_chars(self):
        """Payload characters such as '+' and '/' survive classification."""
        data = b"\xfb\xff\xbf" * 4
        encoded = base64.b64encode(data).decode()
        assert "+" in encoded or "/" in encoded

        assert decode_data_uri("data:application/octet-stream;base64," + encoded) == data

    def test_hex(self):
        """hex payloads are decoded."""
        assert decode_data_uri("data:application/pdf;hex," + PDF_HEAD.hex()) == PDF_HEAD

    def test_encoding_token_case_insensitive(self):
        """The encoding token is matched case-insensitively."""
        uri = "data:application/pdf;BASE64," + base64.b64encode(PDF_HEAD).decode()
        assert decode_data_uri(uri) == PDF_HEAD

    @pytest.mark.parametrize("uri, encoding", [
        ("data:application/pdf;base64,@@@@", "base64"),
        ("data:application/pdf;hex,zz", "hex"),
        ("data:application/pdf;gzip,abcd", "gzip"),
    ])
    def test_decode_failures(self, uri, encoding):
        """Bad payloads and unknown encodings are unsupported protocols naming the encoding."""
        with pytest.raises(FileAddrError, match=encoding) as exc_info:
            decode_data_uri(uri)
        assert ErrCode.UNSUPPORTED_PROTOCOL.matches(exc_info.value)

    def test_not_a_data_uri(self):
        """Strings without the type/subtype;encoding shape are not data URIs."""
        assert not is_data_uri("data:,hello")
        assert not is_data_uri("http://host/data:a/b;base64,xx")


class TestParseURI:
    """Test generic URI classification."""

    def test_http_and_https(self):
        """http(s) URIs keep their full URL."""
        res = parse_uri("http://127.0.0.1:8080/a/b.pdf?x=1")
        assert res.scheme == "http"
        assert res.location == "http://127.0.0.1:8080/a/b.pdf?x=1"
        assert parse_uri("HTTPS://example.com/x").scheme == "https"

    def test_file_uri(self, tmp_path):
        """file URIs resolve to a local path."""
        target = tmp_path / "doc.pdf"
        res = parse_uri(f"file://{target}")
        assert res.scheme == "file"
        assert res.location == str(target)

    def test_file_uri_percent_decoded(self, tmp_path):
        """Percent-encoded paths are decoded."""
        target = tmp_path / "my doc.pdf"
        assert parse_uri(target.as_uri()).location == str(target)

    def test_file_uri_with_host(self):
        """Host and path are joined."""
        assert file_uri_path("data", "/docs/a.pdf").replace("\\", "/") == "data/docs/a.pdf"

    @pytest.mark.parametrize("uri", ["ftp://host/file.pdf", "/just/a/path", "", "file://"])
    def test_unsupported(self, uri):
        """Other schemes, bare paths and empty values are unsupported."""
        with pytest.raises(FileAddrError) as exc_info:
            parse_uri(uri)
        assert ErrCode.UNSUPPORTED_PROTOCOL.matches(exc_info.value)
