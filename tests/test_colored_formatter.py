"""Tests for ColoredFormatter."""

import logging
from io import StringIO
from unittest.mock import patch

import pytest

from discord_soundcloud_player.utils.logging import ColoredFormatter

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def _tty() -> StringIO:
    stream = StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    return stream


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    @pytest.fixture(autouse=True)
    def allow_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)

    @pytest.mark.parametrize(
        "level",
        [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL],
    )
    def test_color_applied_per_level(self, level: int):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())

        output = fmt.format(_make_record(level))

        assert output.startswith(LEVEL_COLORS[level])
        assert RESET in output

    def test_no_color_when_no_color_env_set(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())

        with patch.dict("os.environ", {"NO_COLOR": "1"}):
            output = fmt.format(_make_record(logging.INFO))

        assert "\033[" not in output

    def test_no_color_when_stream_not_tty(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())

        assert "\033[" not in fmt.format(_make_record(logging.ERROR))

    def test_accepts_fmt_keyword(self):
        """dictConfig passes the format string as ``fmt`` to a ``()`` factory."""
        fmt = ColoredFormatter(fmt="%(name)s: %(message)s", stream=StringIO())

        assert fmt.format(_make_record(logging.INFO, "hello")) == "test.logger: hello"

    def test_format_output_matches_pattern(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())

        output = fmt.format(_make_record(logging.INFO, "hello world"))

        plain = output.replace(LEVEL_COLORS[logging.INFO], "").replace(RESET, "")
        assert plain == "INFO | hello world"

    def test_original_record_not_mutated(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())
        record = _make_record(logging.WARNING)

        fmt.format(record)

        assert record.levelname == "WARNING"
