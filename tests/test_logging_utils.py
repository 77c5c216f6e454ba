"""Tests for terminal logging setup."""

from __future__ import annotations

import io
import logging
import sys

import pytest

from pbccenter.core.logging_utils import ColoredFormatter, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    handlers = logging.root.handlers[:]
    level = logging.root.level
    mda_level = logging.getLogger("MDAnalysis").level
    yield
    logging.root.handlers = handlers
    logging.root.setLevel(level)
    logging.getLogger("MDAnalysis").setLevel(mda_level)


class TestSetupLogging:
    @pytest.mark.parametrize(
        "quiet,debug,level",
        [
            (False, False, logging.INFO),
            (True, False, logging.WARNING),
            (False, True, logging.DEBUG),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, quiet, debug, level):
        setup_logging(quiet=quiet, debug=debug)
        assert logging.root.level == level
        assert len(logging.root.handlers) == 1
        assert isinstance(logging.root.handlers[0].formatter, ColoredFormatter)

    def test_mdanalysis_info_suppressed_unless_debugging(self):
        setup_logging()
        assert logging.getLogger("MDAnalysis").level == logging.WARNING

    def test_debug_format_names_logger(self):
        setup_logging(debug=True)
        record = logging.LogRecord("pbccenter.pipeline", logging.DEBUG, "", 0, "hi", None, None)
        assert logging.root.handlers[0].format(record) == "DEBUG [pbccenter.pipeline] hi"


class TestColoredFormatter:
    def test_plain_text_when_not_a_terminal(self, monkeypatch):
        monkeypatch.setattr(sys, "stderr", io.StringIO())
        formatter = ColoredFormatter("%(message)s")
        record = logging.LogRecord("x", logging.ERROR, "", 0, "boom", None, None)
        assert formatter.format(record) == "boom"
