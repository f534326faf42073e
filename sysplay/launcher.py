"""Start one process per command line of a file, optionally held until signalled."""

from __future__ import annotations

import contextlib
import os
import signal
import sys
import time
from typing import Iterable, Sequence, TextIO

from sysplay.tokenizer import split_tokens

__all__ = [
    "read_command_lines",
    "launch_all",
    "signal_all",
    "run_launch",
    "run_signalled",
    "main_launch",
    "main_signalled",
]

_USAGE = "Usage: ./MCP {filename}"
_OPEN_FAILED = "File failed to open! Check permissions on file!"
_SIGNAL_DELAY = 3.0
_SIGNAL_SEQUENCE = (signal.SIGUSR1, signal.SIGSTOP, signal.SIGCONT, signal.SIGINT)


def read_command_lines(path: str | os.PathLike[str]) -> list[list[str]]:
    """Read a file and split each of its lines into command arguments."""
    with open(path, encoding="utf-8") as handle:
        return [split_tokens(line, " ") for line in handle]


def _emit(out: TextIO, text: str) -> None:
    with contextlib.suppress(Exception):
        out.write(text + "\n")
        out.flush()


def _run_child(argv: list[str], out: TextIO, hold: bool, mask: set) -> None:
    """Body of a forked child: optionally wait for SIGUSR1, then exec."""
    try:
        signal.signal(signal.SIGINT, signal.SIG_DFL)
        if hold:
            pid = os.getpid()
            _emit(out, f"Child process created with pid <{pid}>")
            _emit(out, f"Child process <{pid}> Waiting for SIGUSR1")
            signal.pthread_sigmask(signal.SIG_SETMASK, set(mask) | {signal.SIGUSR1})
            signal.sigwait({signal.SIGUSR1})
            _emit(out, f"Child process <{pid}> Received signal SIGUSR1 - Calling exec()")
        signal.pthread_sigmask(signal.SIG_SETMASK, mask)
        if argv:
            os.execvp(argv[0], argv)
    except BaseException:
        pass
    try:
        os.write(2, b"Execution failed!")
    finally:
        os._exit(255)


def launch_all(
    commands: Iterable[Sequence[str]], out: TextIO, hold: bool = False
) -> list[int]:
    """Fork a child for each command and return the children's pids.

    With ``hold`` each child waits for SIGUSR1 before running its command.
    A child whose command cannot be run exits with status 255.
    """
    blocked = {signal.SIGINT}
    if hold:
        blocked.add(signal.SIGUSR1)
    previous = signal.pthread_sigmask(signal.SIG_BLOCK, blocked)
    pids: list[int] = []
    try:
        for argv in commands:
            out.flush()
            try:
                pid = os.fork()
            except OSError:
                print("Fork failed!", file=sys.stderr)
                for started in pids:
                    with contextlib.suppress(ProcessLookupError):
                        os.kill(started, signal.SIGINT)
                raise
            if pid == 0:
                _run_child(list(argv), out, hold, previous)
            if not hold:
                out.write(f"Child process created with pid <{pid}>\n")
            pids.append(pid)
    finally:
        signal.pthread_sigmask(signal.SIG_SETMASK, previous)
    out.flush()
    return pids


def signal_all(
    processes: Iterable[int], signum: int, out: TextIO, delay: float = _SIGNAL_DELAY
) -> None:
    """After ``delay`` seconds, send ``signum`` to every process, logging each."""
    time.sleep(delay)
    parent = os.getpid()
    name = signal.strsignal(signum) or str(signum)
    for pid in processes:
        out.write(
            f"Parent process: <{parent}> - Sending signal: <{name}> "
            f"to child process: <{pid}>\n"
        )
        with contextlib.suppress(ProcessLookupError):
            os.kill(pid, signum)
    out.flush()


def _wait_all(pids: Iterable[int]) -> list[int]:
    """Reap each child and return its exit code (negative for a signal)."""
    return [os.waitstatus_to_exitcode(os.waitpid(pid, 0)[1]) for pid in pids]


def _launch(commands: list[list[str]], out: TextIO) -> list[int]:
    return _wait_all(launch_all(commands, out, False))


def _signalled(commands: list[list[str]], out: TextIO) -> list[int]:
    pids = launch_all(commands, out, True)
    for signum in _SIGNAL_SEQUENCE:
        signal_all(pids, signum, out, _SIGNAL_DELAY)
    return _wait_all(pids)


def run_launch(path: str | os.PathLike[str], out: TextIO) -> list[int]:
    """Run every command of the file at once and wait for all of them."""
    return _launch(read_command_lines(path), out)


def run_signalled(path: str | os.PathLike[str], out: TextIO) -> list[int]:
    """Start held children, then release, stop, resume and interrupt them."""
    return _signalled(read_command_lines(path), out)


def _load(argv: Sequence[str] | None) -> list[list[str]] | None:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(_USAGE, file=sys.stderr)
        return None
    try:
        return read_command_lines(args[0])
    except OSError:
        print(_OPEN_FAILED, file=sys.stderr)
        return None


def main_launch(argv: Sequence[str] | None = None) -> int:
    """Command entry: launch every command of a file and wait."""
    commands = _load(argv)
    if commands is not None:
        _launch(commands, sys.stdout)
    return 0


def main_signalled(argv: Sequence[str] | None = None) -> int:
    """Command entry: launch held commands and drive them with signals."""
    commands = _load(argv)
    if commands is not None:
        _signalled(commands, sys.stdout)
    return 0