"""CPU-bound and I/O-bound busy workloads that run for a set time."""

from __future__ import annotations

import os
import re
import sys
import time
from typing import Sequence, TextIO

__all__ = [
    "parse_seconds",
    "cpu_bound",
    "io_bound",
    "cpubound_main",
    "iobound_main",
]

_LINE = "A string! " * 100 + "\n"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_seconds(argv: Sequence[str], default: int) -> int:
    """Return the value of ``-seconds`` in ``argv``, or ``default``.

    The first argument that is not ``-seconds`` is an illegal flag and
    raises ``ValueError``. Parsing stops at the first ``-seconds``.
    """
    args = iter(argv)
    for arg in args:
        if arg != "-seconds":
            raise ValueError(f"Illegal flag: `{arg}'")
        value = next(args, None)
        if value is None:
            raise ValueError("Missing value for -seconds")
        return _atoi(value)
    return default


def cpu_bound(seconds: float) -> int:
    """Spin on arithmetic until ``seconds`` of CPU time pass.

    Returns the number of rounds run; at least one round always runs.
    """
    start = time.process_time()
    rounds = 0
    while True:
        value = 0
        for _ in range(100):
            value = value + value * 2
        rounds += 1
        if time.process_time() - start >= seconds:
            return rounds


def io_bound(seconds: float, sink: TextIO) -> int:
    """Write lines of text to ``sink`` until ``seconds`` of CPU time pass.

    Returns the number of lines written; at least one is always written.
    """
    start = time.process_time()
    lines = 0
    while True:
        for _ in range(100):
            sink.write("A string! ")
        sink.write("\n")
        lines += 1
        if time.process_time() - start >= seconds:
            return lines


def cpubound_main(argv: Sequence[str] | None = None) -> int:
    """Command entry for the CPU-bound workload."""
    args = sys.argv[1:] if argv is None else argv
    try:
        seconds = parse_seconds(args, 30)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(f"Process: {os.getpid()} - Begining calculation.", flush=True)
    cpu_bound(seconds)
    print(f"Process: {os.getpid()} - Finished.", flush=True)
    return 0


def iobound_main(argv: Sequence[str] | None = None) -> int:
    """Command entry for the I/O-bound workload."""
    args = sys.argv[1:] if argv is None else argv
    try:
        seconds = parse_seconds(args, 5)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(f"Process: {os.getpid()} - Begining to write to file.", flush=True)
    with open(os.devnull, "w") as sink:
        io_bound(seconds, sink)
    print(f"Process: {os.getpid()} - Finished.", flush=True)
    return 0