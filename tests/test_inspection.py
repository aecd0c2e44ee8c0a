# Tests for the read-only table views in bladeworks/inspection.py

import logging

import pytest

from bladeworks.algebra import Algebra
from bladeworks.inspection import (
    TABLE_KINDS,
    format_cayley_table,
    format_dual_table,
    format_metric,
    log_tables,
)


@pytest.fixture(scope="module")
def r2():
    return Algebra.from_counts(2)


def test_geometric_grid(r2):
    lines = format_cayley_table(r2, "geometric").splitlines()
    assert lines[0].split() == ["e", "e1", "e2", "e12"]
    assert lines[2].split() == ["e1", "e1", "e", "e12", "e2"]
    assert lines[3].split() == ["e2", "e2", "-e12", "e", "-e1"]
    assert lines[4].split() == ["e12", "e12", "-e2", "e1", "-e"]


def test_wedge_grid_shows_zeros(r2):
    lines = format_cayley_table(r2, "wedge").splitlines()
    assert lines[2].split() == ["e1", "e1", "0", "e12", "0"]


@pytest.mark.parametrize("kind", TABLE_KINDS)
def test_every_kind_renders(r2, kind):
    assert len(format_cayley_table(r2, kind).splitlines()) == r2.dim + 1


def test_unknown_kind(r2):
    with pytest.raises(ValueError):
        format_cayley_table(r2, "cross")


def test_dual_table(r2):
    assert format_dual_table(r2, "right").splitlines() == [
        "e -> e12",
        "e1 -> e2",
        "e2 -> -e1",
        "e12 -> e",
    ]
    assert format_dual_table(r2, "left").splitlines()[1] == "e1 -> -e2"


def test_metric(r2):
    lines = format_metric(r2, 1).splitlines()
    assert lines[0].split() == ["e1", "e2"]
    assert lines[1].split() == ["e1", "1", "0"]
    assert lines[2].split() == ["e2", "0", "1"]


def test_log_tables_at_debug(r2, caplog):
    with caplog.at_level(logging.DEBUG, logger="bladeworks"):
        log_tables(r2, ["wedge"])
    messages = [r.getMessage() for r in caplog.records]
    assert any("wedge table" in m for m in messages)
    assert any("right dual table" in m for m in messages)


def test_log_tables_silent_above_debug(r2, caplog):
    with caplog.at_level(logging.INFO, logger="bladeworks"):
        log_tables(r2)
    assert not caplog.records
