"""Tests for the error taxonomy."""

import pytest

from fileaddr.core.errors import ErrCode, FileAddrError, parse_error


class TestErrCode:
    """Test code equality checks."""

    def test_error_matches_its_code(self):
        """An error built from a code matches only that code."""
        err = ErrCode.MKDIR.error("test error")

        assert ErrCode.MKDIR.matches(err)
        assert not ErrCode.MKFILE.matches(err)

        parsed = parse_error(err)
        assert parsed is err
        assert parsed.has_code(ErrCode.MKDIR)
        assert not parsed.has_code(ErrCode.MKFILE)

    def test_foreign_errors_never_match(self):
        """Non-FileAddrError values are not parsed and match no code."""
        assert parse_error(ValueError("boom")) is None
        assert parse_error(None) is None
        assert not ErrCode.EMPTY_STREAM.matches(ValueError("boom"))
        assert not ErrCode.EMPTY_STREAM.matches(None)

    def test_codes_are_stable(self):
        """Numeric codes keep their published values."""
        assert ErrCode.MKDIR == 1
        assert ErrCode.UNSUPPORTED_FILE_TYPE == 8
        assert ErrCode.INVALID_OPTION == 14
        assert len(ErrCode) == 14

    def test_message_and_cause(self):
        """The message is the string form and the raw error is kept."""
        cause = OSError("disk full")
        err = ErrCode.TARGET_FILE_WRITE.error("write failed", cause)

        assert str(err) == "write failed"
        assert err.raw_err is cause
        assert err.code is ErrCode.TARGET_FILE_WRITE

    def test_raised_error_is_catchable(self):
        """FileAddrError is a RuntimeError."""
        with pytest.raises(RuntimeError, match="no stream"):
            raise ErrCode.EMPTY_STREAM.error("no stream")
        assert issubclass(FileAddrError, RuntimeError)
