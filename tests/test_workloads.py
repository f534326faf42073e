import io
import os

import pytest

from sysplay.workloads import (
    cpu_bound,
    cpubound_main,
    io_bound,
    iobound_main,
    parse_seconds,
)

LINE = "A string! " * 100 + "\n"


def test_parse_seconds_default():
    assert parse_seconds([], 30) == 30


def test_parse_seconds_value():
    assert parse_seconds(["-seconds", "7"], 5) == 7


def test_parse_seconds_leading_digits():
    assert parse_seconds(["-seconds", "12abc"], 5) == 12


def test_parse_seconds_non_numeric_is_zero():
    assert parse_seconds(["-seconds", "abc"], 5) == 0


def test_parse_seconds_stops_after_first():
    assert parse_seconds(["-seconds", "3", "-bogus"], 5) == 3


def test_parse_seconds_illegal_flag():
    with pytest.raises(ValueError, match="Illegal flag: `-bogus'"):
        parse_seconds(["-bogus"], 5)


def test_parse_seconds_missing_value():
    with pytest.raises(ValueError):
        parse_seconds(["-seconds"], 5)


def test_cpu_bound_runs_at_least_once():
    assert cpu_bound(0) >= 1


def test_io_bound_zero_writes_one_line():
    sink = io.StringIO()
    assert io_bound(0, sink) == 1
    assert sink.getvalue() == LINE


def test_io_bound_lines_are_uniform():
    sink = io.StringIO()
    count = io_bound(0.01, sink)
    lines = sink.getvalue().splitlines(keepends=True)
    assert len(lines) == count
    assert all(line == LINE for line in lines)


def test_cpubound_main_output(capsys):
    assert cpubound_main(["-seconds", "0"]) == 0
    out = capsys.readouterr().out
    assert f"Process: {os.getpid()} - Begining calculation.\n" in out
    assert out.endswith(f"Process: {os.getpid()} - Finished.\n")


def test_iobound_main_output(capsys):
    assert iobound_main(["-seconds", "0"]) == 0
    out = capsys.readouterr().out
    assert f"Process: {os.getpid()} - Begining to write to file.\n" in out
    assert out.endswith(f"Process: {os.getpid()} - Finished.\n")


def test_iobound_main_illegal_flag(capsys):
    assert iobound_main(["-x"]) == 1
    assert "Illegal flag: `-x'" in capsys.readouterr().err


def test_cpubound_main_illegal_flag(capsys):
    assert cpubound_main(["--fast"]) == 1
    assert "Illegal flag: `--fast'" in capsys.readouterr().err