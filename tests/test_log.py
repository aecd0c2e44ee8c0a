# Tests for the logging hierarchy in log.py

import logging

from log import ROOT_NAME, _ColorFormatter, get_logger


def test_logger_is_namespaced():
    assert get_logger("tools").name == "bladeworks.tools"


def test_package_modules_not_double_prefixed():
    assert get_logger("bladeworks.algebra").name == "bladeworks.algebra"
    assert get_logger(ROOT_NAME).name == ROOT_NAME


def test_root_has_single_console_handler():
    get_logger("a")
    get_logger("b")
    root = logging.getLogger(ROOT_NAME)
    streams = [h for h in root.handlers if type(h) is logging.StreamHandler]
    assert len(streams) == 1


def test_color_formatter_leaves_record_untouched():
    fmt = _ColorFormatter("%(levelname)s %(message)s", use_color=True)
    record = logging.LogRecord("bladeworks.x", logging.WARNING, __file__, 1, "hi", None, None)
    out = fmt.format(record)
    assert "\033[33m" in out
    assert record.levelname == "WARNING"


def test_plain_formatter():
    fmt = _ColorFormatter("%(levelname)s %(message)s", use_color=False)
    record = logging.LogRecord("bladeworks.x", logging.INFO, __file__, 1, "hi", None, None)
    assert fmt.format(record) == "INFO hi"


def test_construction_logs_debug(caplog):
    from bladeworks.algebra import Algebra
    with caplog.at_level(logging.DEBUG, logger=ROOT_NAME):
        Algebra.from_counts(1, 0, 2)
    assert any(r.name == "bladeworks.algebra" for r in caplog.records)
