"""Tests for prowl._errors."""

import pytest

from prowl._errors import ConfigError, ProwlError, ScanError, WatchError


class TestErrorHierarchy:
    """All prowl errors inherit from ProwlError."""

    def test_prowl_error_is_exception(self) -> None:
        assert issubclass(ProwlError, Exception)

    def test_config_error_inherits(self) -> None:
        assert issubclass(ConfigError, ProwlError)

    def test_scan_error_inherits(self) -> None:
        assert issubclass(ScanError, ProwlError)

    def test_watch_error_inherits(self) -> None:
        assert issubclass(WatchError, ProwlError)

    def test_catch_all_prowl_errors(self) -> None:
        """All specific errors are catchable via ProwlError."""
        for error_cls in (ConfigError, ScanError, WatchError):
            with pytest.raises(ProwlError):
                raise error_cls("test")
