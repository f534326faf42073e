"""Bank accounts read from a file and a sequential transaction processor."""

from __future__ import annotations

import os
import re
import sys
import threading
from dataclasses import dataclass, field
from typing import Iterable, Sequence, TextIO

from sysplay.tokenizer import split_tokens

__all__ = ["Account", "Bank", "parse_input", "main"]

_USAGE = "Usage: ./bank file.txt"
_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT = re.compile(r"\s*([+-]?\d+)")


def _to_float(text: str) -> float:
    match = _FLOAT.match(text)
    return float(match.group(1)) if match else 0.0


def _to_int(text: str) -> int:
    match = _INT.match(text)
    return int(match.group(1)) if match else 0


@dataclass
class Account:
    """One bank account and the activity it has seen since the last reward."""

    number: str
    password: str
    balance: float
    reward_rate: float
    tracker: float = 0.0
    out_file: str | None = None
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )


class Bank:
    """A set of accounts that transactions are applied to."""

    def __init__(self, accounts: Iterable[Account], out: TextIO | None = None) -> None:
        self.accounts = list(accounts)
        self.out = out

    def _say(self, text: str) -> None:
        (sys.stdout if self.out is None else self.out).write(text + "\n")

    def find(self, number: str) -> Account:
        """Return the account with ``number``; raise ``KeyError`` if none."""
        for account in self.accounts:
            if account.number == number:
                return account
        raise KeyError(f"Invalid Account Number: {number}")

    def _lookup(self, number: str) -> Account | None:
        try:
            return self.find(number)
        except KeyError as exc:
            self._say(exc.args[0])
            return None

    def process(self, tokens: Sequence[str]) -> bool:
        """Apply one transaction given as tokens.

        ``C`` appends the balance to the account's file, ``W`` withdraws,
        ``D`` deposits and ``T`` transfers to another account. Returns True
        when a withdrawal, deposit or transfer was applied. A wrong
        password or a malformed line leaves every account untouched.
        """
        if len(tokens) < 3:
            return False
        action, number, given, *rest = tokens
        account = self._lookup(number)
        if account is None or account.password != given:
            return False
        if action == "C":
            if account.out_file:
                with open(account.out_file, "a", encoding="utf-8") as handle:
                    handle.write(f"Current Balance:\t{account.balance:f}\n")
            return False
        if action in ("W", "D"):
            if not rest:
                return False
            amount = _to_float(rest[0])
            with account.lock:
                account.balance += amount if action == "D" else -amount
                account.tracker += amount
            return True
        if action == "T":
            if len(rest) < 2:
                return False
            target = self._lookup(rest[0])
            if target is None:
                return False
            money = _to_float(rest[1])
            with account.lock:
                account.balance -= money
                account.tracker += money
            with target.lock:
                target.balance += money
            return True
        return False

    def apply_rewards(self) -> None:
        """Add each account's reward on its tracked activity, then reset it."""
        for account in self.accounts:
            with account.lock:
                account.balance += account.reward_rate * account.tracker
                account.tracker = 0.0

    def write_summary(self, path: str | os.PathLike[str], spacing: int = 0) -> None:
        """Write each account's final balance, followed by ``spacing`` blank lines."""
        with open(path, "w", encoding="utf-8") as handle:
            for index, account in enumerate(self.accounts):
                handle.write(
                    f"{index} balance:\t{account.balance:.2f}\n" + "\n" * spacing
                )


def _next_line(lines, what: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise ValueError(f"input ended while reading {what}") from None


def parse_input(
    lines: Iterable[str],
    output_dir: str | os.PathLike[str],
    count: int | None = None,
) -> tuple[Bank, list[list[str]]]:
    """Read accounts and transactions from the lines of an input file.

    The first line holds the number of accounts, used unless ``count`` is
    given. Each account takes five lines: a heading, number, password,
    balance and reward rate. Every account gets a file in ``output_dir``.
    The remaining lines are returned as token lists.
    """
    it = iter(lines)
    header = _next_line(it, "the account count")
    total = _to_int(header) if count is None else count
    os.makedirs(output_dir, exist_ok=True)
    accounts = []
    for index in range(total):
        _next_line(it, f"account {index}")
        number = _next_line(it, "an account number").rstrip("\n")
        secret_line = _next_line(it, "password").rstrip("\n")
        balance = _to_float(_next_line(it, "a balance"))
        rate = _to_float(_next_line(it, "a reward rate"))
        out_file = os.path.join(os.fspath(output_dir), f"account{index}.txt")
        with open(out_file, "w", encoding="utf-8") as handle:
            handle.write(f"account {index}:\n")
        accounts.append(Account(number, secret_line, balance, rate, 0.0, out_file))
    commands = [split_tokens(line, " ") for line in it]
    return Bank(accounts), commands


def main(argv: Sequence[str] | None = None) -> int:
    """Command entry: run every transaction of a file in order."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(_USAGE, file=sys.stderr)
        return 1
    try:
        handle = open(args[0], encoding="utf-8")
    except OSError:
        print("FAILED!!!")
        return 1
    with handle:
        bank, commands = parse_input(handle, os.path.join(os.getcwd(), "outputs"))
    for tokens in commands:
        bank.process(tokens)
    bank.apply_rewards()
    bank.write_summary("output.txt", 0)
    return 0