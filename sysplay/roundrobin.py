"""Round-robin time slicing of child processes with SIGSTOP and SIGCONT."""

from __future__ import annotations

import contextlib
import os
import signal
import sys
import time
from dataclasses import dataclass
from typing import Iterable, Sequence, TextIO

from sysplay.launcher import read_command_lines

__all__ = [
    "Job",
    "RoundRobin",
    "read_proc_status",
    "read_cpu_time",
    "format_report",
    "main_plain",
    "main_report",
]

_RULE = "-" * 28
_STATUS_KEYS = ("Name", "State", "VmSize", "VmPeak", "Threads", "PPid")
_CLOCK_TICKS = 100
_OPEN_FAILED = "File failed to open! Check permissions on file!"
_WAIT_FLAGS = os.WNOHANG | os.WUNTRACED | os.WCONTINUED


@dataclass
class Job:
    """One command under the scheduler, with its time slice in seconds."""

    argv: list[str]
    quantum: float = 1.0
    pid: int = 0
    finished: bool = False
    failed: bool = False

    @property
    def status(self) -> int:
        """1 once the job has finished, successfully or not, else 0."""
        return int(self.finished)


def read_proc_status(pid: int) -> list[str]:
    """Return the interesting lines of ``/proc/<pid>/status``.

    Kept are the lines starting with Name, State, VmSize, VmPeak,
    Threads and PPid, in file order, without their newlines.
    """
    with open(f"/proc/{pid}/status", encoding="utf-8", errors="replace") as handle:
        return [
            line.rstrip("\n")
            for line in handle
            if line.startswith(_STATUS_KEYS)
        ]


def read_cpu_time(pid: int, clock_ticks: int = _CLOCK_TICKS) -> float:
    """Return whole seconds of user plus system CPU time of a process."""
    with open(f"/proc/{pid}/stat", encoding="utf-8", errors="replace") as handle:
        data = handle.read()
    fields = data[data.rindex(")") + 1 :].split()
    # fields[0] is the state (stat field 3); utime and stime are fields 14, 15.
    utime, stime = int(fields[11]), int(fields[12])
    return float((utime + stime) // clock_ticks)


def format_report(
    index: int,
    pid: int,
    elapsed_us: int,
    status_lines: Iterable[str],
    cpu_seconds: float,
) -> str:
    """Build the per-slice report printed for a process."""
    lines = [
        _RULE,
        f"Printing information for process {index} with pid <{pid}>...",
        *status_lines,
        f"Approximate execution time: {elapsed_us / 1_000_000:f} seconds.",
        "The total CPU time for this process's allocated time is "
        f"{cpu_seconds:f} seconds.",
        _RULE,
    ]
    return "\n".join(lines)


def _child(argv: list[str], parent: int, mask: set) -> None:
    """Body of a forked child: wait for SIGUSR1, then exec or report failure."""
    try:
        signal.signal(signal.SIGINT, signal.SIG_DFL)
        signal.sigwait({signal.SIGUSR1})
        signal.pthread_sigmask(signal.SIG_SETMASK, mask)
        if argv:
            os.execvp(argv[0], argv)
    except BaseException:
        pass
    try:
        os.kill(parent, signal.SIGUSR1)
    finally:
        os._exit(255)


class RoundRobin:
    """Runs each job for its quantum in turn until every job has finished.

    A child whose command cannot be started tells the scheduler with
    SIGUSR1 and is counted as finished unsuccessfully.
    """

    def __init__(
        self,
        jobs: Iterable[Job | Sequence[str]],
        out: TextIO | None = None,
        quantum: float = 1.0,
        report: bool = False,
        clock_ticks: int = _CLOCK_TICKS,
    ) -> None:
        self.jobs = [
            job if isinstance(job, Job) else Job(list(job), quantum) for job in jobs
        ]
        if not self.jobs:
            raise ValueError("no commands to schedule")
        self.out = sys.stdout if out is None else out
        self.report = report
        self.clock_ticks = clock_ticks
        self._reaped: set[int] = set()
        self._started_at = time.monotonic()

    def _say(self, text: str) -> None:
        self.out.write(text + "\n")
        self.out.flush()

    def _after_listing(self) -> None:
        """Run after the created processes have been listed; flushes output."""
        self.out.flush()

    def _report_text(self, index: int, elapsed_us: int) -> str:
        job = self.jobs[index]
        try:
            lines = read_proc_status(job.pid)
        except OSError:
            lines = []
        try:
            cpu = read_cpu_time(job.pid, self.clock_ticks)
        except (OSError, ValueError, IndexError):
            cpu = 0.0
        return format_report(index, job.pid, elapsed_us, lines, cpu)

    def _signal_all(self, signum: int) -> None:
        for job in self.jobs:
            with contextlib.suppress(ProcessLookupError):
                os.kill(job.pid, signum)

    def _mark_failed(self, pid: int) -> Job | None:
        for index, job in enumerate(self.jobs):
            if job.pid == pid and not job.finished:
                job.failed = job.finished = True
                self._say(
                    f"Process {index} with pid <{pid}> executed unsuccessfully!"
                )
                return job
        return None

    def _collect_failures(self) -> None:
        while (info := signal.sigtimedwait({signal.SIGUSR1}, 0)) is not None:
            self._mark_failed(info.si_pid)

    def _spawn(self, mask: set) -> None:
        parent = os.getpid()
        for job in self.jobs:
            self.out.flush()
            sys.stdout.flush()
            sys.stderr.flush()
            try:
                pid = os.fork()
            except OSError:
                print("Fork failed!", file=sys.stderr)
                raise
            if pid == 0:
                _child(job.argv, parent, mask)
            job.pid = pid

    def _resume(self, index: int) -> None:
        job = self.jobs[index]
        try:
            os.kill(job.pid, signal.SIGCONT)
        except OSError:
            print(
                f"Error trying to start child process <{job.pid}>.", file=sys.stderr
            )
            return
        self._started_at = time.monotonic()
        self._say(f"Started process {index} with pid <{job.pid}>")

    def _serve(self, index: int) -> None:
        job = self.jobs[index]
        deadline = time.monotonic() + job.quantum
        while (remaining := deadline - time.monotonic()) > 0:
            info = signal.sigtimedwait({signal.SIGUSR1}, remaining)
            if info is None or self._mark_failed(info.si_pid) is job:
                break
        elapsed_us = int((time.monotonic() - self._started_at) * 1_000_000)
        if self.report:
            self._say(self._report_text(index, elapsed_us))
        if job.finished:
            return
        try:
            os.kill(job.pid, signal.SIGSTOP)
        except OSError:
            print(f"Error trying to stop child process <{job.pid}>.", file=sys.stderr)
        else:
            self._say(f"Stopped process {index} with pid <{job.pid}>")
        self._collect_failures()
        if job.finished:
            return
        try:
            pid, status = os.waitpid(job.pid, _WAIT_FLAGS)
        except ChildProcessError:
            print(
                f"Error calling waitpid() on child process <{job.pid}>!",
                file=sys.stderr,
            )
            return
        if pid and (os.WIFEXITED(status) or os.WIFSIGNALED(status)):
            self._reaped.add(job.pid)
            job.finished = True
            self._say(
                f"Child process {index} with pid <{job.pid}> executed successfully!"
            )

    def _reap(self) -> None:
        for job in self.jobs:
            if job.pid and job.pid not in self._reaped:
                with contextlib.suppress(ChildProcessError):
                    os.waitpid(job.pid, 0)
                self._reaped.add(job.pid)

    def _schedule(self) -> list[Job]:
        self._say("Processes created:")
        self._signal_all(signal.SIGUSR1)
        self._signal_all(signal.SIGSTOP)
        for index, job in enumerate(self.jobs):
            self._say(f"process {index} with pid <{job.pid}>")
        self._after_listing()
        current = 0
        self._resume(current)
        while True:
            if not self.jobs[current].finished:
                self._serve(current)
            following = (current + 1) % len(self.jobs)
            if not self.jobs[following].finished:
                self._resume(following)
            current = following
            if all(job.finished for job in self.jobs):
                break
        self._signal_all(signal.SIGINT)
        self._reap()
        for job in self.jobs:
            self._say(f"Process <{job.pid}> finished with status <{job.status}>")
        self._say("All processes finished successfully!")
        return self.jobs

    def run(self) -> list[Job]:
        """Start every job, share the CPU between them, and return the jobs."""
        previous = signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGUSR1})
        try:
            self._spawn(previous)
            return self._schedule()
        except BaseException:
            for job in self.jobs:
                if job.pid and job.pid not in self._reaped:
                    with contextlib.suppress(ProcessLookupError):
                        os.kill(job.pid, signal.SIGKILL)
            self._reap()
            raise
        finally:
            with contextlib.suppress(OSError):
                self._collect_failures()
            signal.pthread_sigmask(signal.SIG_SETMASK, previous)


def _main(
    argv: Sequence[str] | None, usage: str, quantum: float, report: bool
) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(usage, file=sys.stderr)
        return 0
    try:
        commands = read_command_lines(args[0])
    except OSError:
        print(_OPEN_FAILED, file=sys.stderr)
        return 0
    if not commands:
        return 0
    RoundRobin(commands, sys.stdout, quantum, report).run()
    return 0


def main_plain(argv: Sequence[str] | None = None) -> int:
    """Command entry: one-second round robin over the commands of a file."""
    return _main(argv, "Usage: ./MCP {filename}", 1.0, False)


def main_report(argv: Sequence[str] | None = None) -> int:
    """Command entry: three-second round robin with a report per slice."""
    return _main(argv, "Usage: ./part{i} {filename}", 3.0, True)