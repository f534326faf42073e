"""Multi-threaded transaction processing with reward updates from a bank thread."""

from __future__ import annotations

import os
import sys
import threading
from typing import Callable, Sequence, TextIO

from sysplay.ledger import Bank, parse_input

__all__ = [
    "PeriodicUpdater",
    "partition",
    "run_partitioned",
    "run_periodic",
    "main_partitioned",
    "main_periodic",
]

_USAGE = "Usage: ./bank file.txt"
_WORKERS = 10
_THRESHOLD = 5000
_OUTPUT_FILE = "output.txt"

_print_lock = threading.Lock()


def _emitter(bank: Bank) -> Callable[[str], None]:
    def emit(text: str) -> None:
        out: TextIO = sys.stdout if bank.out is None else bank.out
        with _print_lock:
            out.write(text + "\n")

    return emit


def partition(commands: Sequence[Sequence[str]], workers: int) -> list[list[Sequence[str]]]:
    """Split commands into ``workers`` equal consecutive chunks.

    Each chunk holds ``len(commands) // workers`` commands; any remainder
    at the end is not assigned to a worker.
    """
    if workers < 1:
        raise ValueError("at least one worker is required")
    size = len(commands) // workers
    return [list(commands[index * size : (index + 1) * size]) for index in range(workers)]


def run_partitioned(bank: Bank, commands: Sequence[Sequence[str]], workers: int = _WORKERS) -> int:
    """Process chunks of commands on worker threads, then apply rewards once.

    Returns the number of withdrawals, deposits and transfers applied.
    """
    chunks = partition(commands, workers)
    emit = _emitter(bank)
    applied = 0
    count_lock = threading.Lock()

    def worker(position: int, chunk: list[Sequence[str]]) -> None:
        nonlocal applied
        done = sum(1 for tokens in chunk if bank.process(tokens))
        with count_lock:
            applied += done
        emit(f"Thread {position} has terminated")

    threads = [
        threading.Thread(target=worker, args=(position, chunk))
        for position, chunk in enumerate(chunks)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    emit("Updating balances...")
    bank.apply_rewards()
    return applied


class PeriodicUpdater(threading.Thread):
    """Bank thread that applies rewards whenever enough transactions pile up.

    Workers report each validated transaction with ``record``. Once the
    shared count reaches ``threshold`` they pause; when every live worker
    is paused, or the last one finishes, the bank thread applies rewards,
    appends each balance to its account file and releases the workers.
    """

    def __init__(self, bank: Bank, workers: int, threshold: int = _THRESHOLD) -> None:
        super().__init__(name="bank")
        if workers < 1:
            raise ValueError("at least one worker is required")
        self.bank = bank
        self.threshold = threshold
        self.alive = workers
        self.waiting = 0
        self.pending = 0
        self.updates = 0
        self._due = False
        self._generation = 0
        self._cond = threading.Condition()
        self._emit = _emitter(bank)

    def record(self, counted: bool) -> None:
        """Note a validated transaction; pause if an update is due."""
        with self._cond:
            if counted:
                self.pending += 1
            if self.pending < self.threshold:
                return
            self.waiting += 1
            generation = self._generation
            if self.waiting == self.alive:
                self._due = True
                self._cond.notify_all()
            self._cond.wait_for(lambda: self._generation != generation)

    def finish(self) -> None:
        """Note that a worker has processed all of its commands."""
        with self._cond:
            self.alive -= 1
            if self.alive == 0 or self.alive == self.waiting:
                self._emit("Signaling for final update.")
                self._due = True
                self._cond.notify_all()

    def _update(self) -> None:
        self.bank.apply_rewards()
        for account in self.bank.accounts:
            if account.out_file:
                with open(account.out_file, "a", encoding="utf-8") as handle:
                    handle.write(f"Current Balance:\t{account.balance:.2f}\n")
        self.updates += 1
        self.pending = 0
        self.waiting = 0
        self._generation += 1
        self._cond.notify_all()

    def run(self) -> None:
        """Apply updates as they fall due until every worker has finished."""
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._due)
                self._due = False
                self._update()
                if self.alive == 0:
                    return


def _validated(bank: Bank, tokens: Sequence[str], emit: Callable[[str], None]) -> tuple[bool, bool]:
    """Apply a command; return whether it was authorised and whether it counts."""
    if len(tokens) < 3:
        return False, False
    action, number, password = tokens[:3]
    try:
        account = bank.find(number)
    except KeyError as exc:
        emit(exc.args[0])
        return False, False
    if account.password != password:
        return False, False
    if action == "C":
        return True, False
    return True, bank.process(tokens)


def run_periodic(
    bank: Bank,
    commands: Sequence[Sequence[str]],
    workers: int = _WORKERS,
    threshold: int = _THRESHOLD,
) -> int:
    """Process chunks on worker threads with periodic reward updates.

    Balance checks are validated but write nothing. Returns the number of
    reward updates the bank thread made.
    """
    chunks = partition(commands, workers)
    updater = PeriodicUpdater(bank, workers, threshold)
    emit = _emitter(bank)

    def worker(chunk: list[Sequence[str]]) -> None:
        try:
            for tokens in chunk:
                authorised, counted = _validated(bank, tokens, emit)
                if authorised:
                    updater.record(counted)
        finally:
            updater.finish()

    threads = [threading.Thread(target=worker, args=(chunk,)) for chunk in chunks]
    updater.start()
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    updater.join()
    return updater.updates


def _load(argv: Sequence[str] | None, count: int | None) -> tuple[Bank, list[list[str]]] | None:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(_USAGE, file=sys.stderr)
        return None
    try:
        handle = open(args[0], encoding="utf-8")
    except OSError:
        print("File open failed!")
        return None
    with handle:
        return parse_input(handle, os.path.join(os.getcwd(), "outputs"), count)


def main_partitioned(argv: Sequence[str] | None = None) -> int:
    """Command entry: threaded processing with one reward update at the end."""
    loaded = _load(argv, None)
    if loaded is None:
        return 1
    bank, commands = loaded
    run_partitioned(bank, commands, _WORKERS)
    print("Bank thread has exited")
    bank.write_summary(_OUTPUT_FILE, 1)
    return 0


def main_periodic(argv: Sequence[str] | None = None) -> int:
    """Command entry: threaded processing with periodic reward updates."""
    loaded = _load(argv, _WORKERS)
    if loaded is None:
        return 1
    bank, commands = loaded
    run_periodic(bank, commands, _WORKERS, _THRESHOLD)
    bank.write_summary(_OUTPUT_FILE, 1)
    return 0