# tests/test_logging_utils.py

import logging
from contextlib import contextmanager

import pytest

from worldcal.logging_utils import configure_logging, level_for


@contextmanager
def bare_root():
    # pytest attaches its capture handlers per test phase; park them here
    root = logging.getLogger()
    saved, level = root.handlers[:], root.level
    root.handlers.clear()
    try:
        yield root
    finally:
        for h in root.handlers:
            h.close()
        root.handlers[:] = saved
        root.setLevel(level)


@pytest.mark.parametrize("verbosity,level", [
    (0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG),
])
def test_level_for(verbosity, level):
    assert level_for(verbosity) == level


def test_writes_to_log_files(tmp_path):
    path = tmp_path / "nested" / "worldcal.log"
    with bare_root() as root:
        assert configure_logging(0, [str(path)]) is True
        assert len(root.handlers) == 2
        assert root.level == logging.WARNING
        logging.getLogger("worldcal.engines.calendar").warning("Calendar %s: clamped", "gregorian")
        for h in root.handlers:
            h.flush()
    text = path.read_text(encoding="utf-8")
    assert "[WARNING] worldcal.engines.calendar: Calendar gregorian: clamped" in text


def test_leaves_configured_hosts_alone():
    with bare_root() as root:
        existing = logging.NullHandler()
        root.addHandler(existing)
        assert configure_logging(2) is False
        assert root.handlers == [existing]
