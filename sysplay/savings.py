"""Savings accounts that grow alongside the threaded bank's reward updates."""

from __future__ import annotations

import os
import sys
import threading
from typing import Iterable, Sequence, TextIO

from sysplay.ledger import Bank, parse_input
from sysplay.threaded_bank import PeriodicUpdater, _validated, partition

__all__ = ["SavingsLedger", "initial_savings", "run_with_savings", "main"]

_USAGE = "Usage: ./bank file.txt"
_WORKERS = 10
_THRESHOLD = 5000
_SAVINGS_SHARE = 0.2
_SAVINGS_RATE = 1.02
_OUTPUT_FILE = "output.txt"
_SAVINGS_OUTPUT_FILE = "savings_output.txt"


def initial_savings(balances: Iterable[float]) -> list[float]:
    """Return the savings set aside from each balance: a fifth of it."""
    return [balance * _SAVINGS_SHARE for balance in balances]


class SavingsLedger:
    """Savings balances kept in their own directory, one file per account.

    Each call to ``accrue`` grows every balance by ``rate`` and appends
    the new balance to that account's file.
    """

    def __init__(
        self,
        balances: Iterable[float],
        directory: str | os.PathLike[str],
        out: TextIO | None = None,
        rate: float = _SAVINGS_RATE,
    ) -> None:
        self.balances = list(balances)
        self.directory = os.fspath(directory)
        self.out = out
        self.rate = rate
        self.accruals = 0
        self.files = [
            os.path.join(self.directory, f"account{index}.txt")
            for index in range(len(self.balances))
        ]
        self._lock = threading.Lock()

    def _say(self, text: str) -> None:
        (sys.stdout if self.out is None else self.out).write(text + "\n")

    def create_files(self) -> list[str]:
        """Create the savings directory and a headed file for every account."""
        try:
            os.mkdir(self.directory, 0o777)
        except OSError:
            self._say("Directory creation failed")
            os.makedirs(self.directory, exist_ok=True)
        for index, path in enumerate(self.files):
            with open(path, "w", encoding="utf-8") as handle:
                handle.write(f"account {index}:\n")
        return list(self.files)

    def accrue(self) -> None:
        """Grow every balance by the savings rate and log it to its file."""
        with self._lock:
            for index, path in enumerate(self.files):
                self.balances[index] *= self.rate
                with open(path, "a", encoding="utf-8") as handle:
                    handle.write(f"Current Balance:\t{self.balances[index]:.2f}\n")
            self.accruals += 1
        self._say("Child accounts updated")

    def write_summary(self, path: str | os.PathLike[str]) -> None:
        """Write every savings balance followed by a blank line."""
        with open(path, "w", encoding="utf-8") as handle:
            for index, balance in enumerate(self.balances):
                handle.write(f"{index} balance:\t{balance:.2f}\n\n")


class _SavingsUpdater(PeriodicUpdater):
    """Bank thread that also grows the savings after every reward update."""

    def __init__(
        self, bank: Bank, workers: int, threshold: int, savings: SavingsLedger
    ) -> None:
        super().__init__(bank, workers, threshold)
        self.savings = savings

    def _update(self) -> None:
        super()._update()
        self.savings.accrue()


def run_with_savings(
    bank: Bank,
    commands: Sequence[Sequence[str]],
    workers: int = _WORKERS,
    threshold: int = _THRESHOLD,
    savings_dir: str | os.PathLike[str] = "savings",
) -> SavingsLedger:
    """Run the periodic threaded bank while a savings ledger follows along.

    A fifth of every starting balance goes into savings; each reward
    update of the bank grows the savings once. Returns the savings ledger.
    """
    out = sys.stdout if bank.out is None else bank.out
    originals = [account.balance for account in bank.accounts]
    saved = initial_savings(originals)
    for index, (original, amount) in enumerate(zip(originals, saved)):
        out.write(f"Original Balance in account {index}: {original:.2f}\n")
        out.write(f"New Balance in account {index}: {amount:.2f}\n")
    savings = SavingsLedger(saved, savings_dir, bank.out)
    savings.create_files()

    chunks = partition(commands, workers)
    updater = _SavingsUpdater(bank, workers, threshold, savings)

    def emit(text: str) -> None:
        out.write(text + "\n")

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
    return savings


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry: threaded bank with periodic updates and savings."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(_USAGE, file=sys.stderr)
        return 1
    try:
        handle = open(args[0], encoding="utf-8")
    except OSError:
        print("File open failed!")
        return 1
    cwd = os.getcwd()
    with handle:
        bank, commands = parse_input(handle, os.path.join(cwd, "outputs"), _WORKERS)
    savings = run_with_savings(
        bank, commands, _WORKERS, _THRESHOLD, os.path.join(cwd, "savings")
    )
    print("Bank thread has now terminated.")
    savings.write_summary(_SAVINGS_OUTPUT_FILE)
    print("Exiting child process")
    bank.write_summary(_OUTPUT_FILE, 1)
    return 0