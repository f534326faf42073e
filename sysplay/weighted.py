"""Round-robin scheduling with a time slice that depends on the kind of job."""

from __future__ import annotations

import sys
from enum import Enum
from typing import Sequence, TextIO

from sysplay.launcher import read_command_lines
from sysplay.roundrobin import Job, RoundRobin

__all__ = ["JobKind", "classify", "quantum_for", "allocation_summary", "main"]

_RULE = "-" * 43
_USAGE = "Usage: ./part5 {filename}"
_OPEN_FAILED = "File failed to open! Check permissions on file!"


class JobKind(Enum):
    """Kinds of job, each with a label and seconds of CPU time per turn."""

    COMMAND = ("Command", 1)
    IO = ("I/O", 3)
    COMPUTE = ("Compute", 5)

    def __init__(self, label: str, seconds: int) -> None:
        self.label = label
        self.seconds = seconds


_PROGRAMS = {
    "./cpubound": JobKind.COMPUTE,
    "./iobound": JobKind.IO,
}


def classify(command: str) -> JobKind:
    """Return the kind of job a program name stands for."""
    return _PROGRAMS.get(command, JobKind.COMMAND)


def quantum_for(kind: JobKind) -> int:
    """Return the seconds of CPU time a job of ``kind`` gets per turn."""
    return kind.seconds


def allocation_summary() -> str:
    """Describe the time slice of every kind of job, one line each."""
    return "\n".join(
        f"{kind.label} receives {kind.seconds} seconds per interval"
        for kind in JobKind
    )


class _WeightedRoundRobin(RoundRobin):
    """Round robin whose slices follow each job's kind."""

    def __init__(self, commands: Sequence[Sequence[str]], out: TextIO) -> None:
        argvs = [list(argv) for argv in commands]
        self.kinds = [
            classify(argv[0]) if argv else JobKind.COMMAND for argv in argvs
        ]
        jobs = [
            Job(argv, float(quantum_for(kind)))
            for argv, kind in zip(argvs, self.kinds)
        ]
        super().__init__(jobs, out, report=True)

    def _after_listing(self) -> None:
        self._say(_RULE)
        self._say("Allocated time for different commands:")
        self._say(allocation_summary())
        self._say(_RULE)

    def _report_text(self, index: int, elapsed_us: int) -> str:
        lines = super()._report_text(index, elapsed_us).split("\n")
        kind = self.kinds[index]
        lines[0] = lines[-1] = _RULE
        lines.insert(
            2, f"Of type {kind.label} allocating {kind.seconds} seconds of CPU time."
        )
        return "\n".join(lines)

    def run(self) -> list[Job]:
        self._say(_RULE)
        return super().run()


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry: weighted round robin over the commands of a file."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(_USAGE, file=sys.stderr)
        return 0
    try:
        commands = read_command_lines(args[0])
    except OSError:
        print(_OPEN_FAILED, file=sys.stderr)
        return 0
    if not commands:
        return 0
    _WeightedRoundRobin(commands, sys.stdout).run()
    return 0