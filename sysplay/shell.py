"""A small interactive or scripted shell over the file-system commands."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Sequence, TextIO

from sysplay.commands import (
    CommandError,
    change_dir,
    copy_file,
    delete_file,
    display_file,
    list_dir,
    make_dir,
    move_file,
    show_current_dir,
)
from sysplay.tokenizer import split_tokens

__all__ = ["Shell", "main"]

_USAGE = "Usage: ./pseudo-shell [-f {filename}]"
_OUTPUT_FILE = "output.txt"
_NO_COMMAND = "No command was inputted"
_READ_ERROR = "Error interpretting input when using getline()."
_FAREWELL = "End of file\nBye Bye!\n"


@dataclass(frozen=True)
class _Spec:
    arity: int
    usage: str
    action: Callable[[list[str], TextIO], None]


_COMMANDS: dict[str, _Spec] = {
    "ls": _Spec(0, "", lambda args, out: list_dir(out)),
    "pwd": _Spec(0, "", lambda args, out: show_current_dir(out)),
    "mkdir": _Spec(
        1,
        "Mkdir command requires argument for directory name",
        lambda args, out: make_dir(args[0]),
    ),
    "cd": _Spec(
        1,
        "Cd command requires argument for directory name",
        lambda args, out: change_dir(args[0]),
    ),
    "cp": _Spec(
        2,
        "Cp command requires argument for source and destination file",
        lambda args, out: copy_file(args[0], args[1]),
    ),
    "mv": _Spec(
        2,
        "Mv command requires argument for source and destination file",
        lambda args, out: move_file(args[0], args[1]),
    ),
    "rm": _Spec(
        1,
        "Rm command requires argument for directory name",
        lambda args, out: delete_file(args[0]),
    ),
    "cat": _Spec(
        1,
        "Cat command requires argument for directory name",
        lambda args, out: display_file(args[0], out),
    ),
}


class Shell:
    """Runs ``;``-separated command lines, writing all output to ``out``."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = sys.stdout if out is None else out

    def _say(self, message: str) -> None:
        self.out.write(message + "\n")

    def execute(self, tokens: Sequence[str]) -> bool:
        """Run one command given as tokens; return False when asked to exit."""
        if not tokens:
            self._say(_NO_COMMAND)
            return True
        command, *args = tokens
        if command == "exit" and not args:
            return False
        spec = _COMMANDS.get(command)
        if spec is None:
            self._say(f"Error! Unrecognized command: {command}")
            return True
        if len(args) < spec.arity:
            self._say(spec.usage)
            return True
        try:
            spec.action(args, self.out)
        except CommandError as exc:
            self._say(str(exc))
        return True

    def execute_line(self, line: str) -> bool:
        """Run every command of a line; return False when asked to exit."""
        segments = split_tokens(line, ";")
        if not segments:
            self._say(_NO_COMMAND)
            return True
        for segment in segments:
            if not self.execute(split_tokens(segment, " ")):
                return False
        return True

    def run(self, source: TextIO, interactive: bool = False) -> None:
        """Read and run lines from ``source`` until exit or end of input."""
        while True:
            if interactive:
                self.out.write(">>>")
                self.out.flush()
            line = source.readline()
            if not line:
                if interactive:
                    self._say(_READ_ERROR)
                else:
                    self.out.write(_FAREWELL)
                return
            if not self.execute_line(line):
                return


def main(argv: Sequence[str] | None = None) -> int:
    """Start the shell interactively, or run a script with ``-f file``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        Shell(sys.stdout).run(sys.stdin, interactive=True)
        return 0
    if len(args) == 2 and args[0] == "-f":
        filename = args[1]
        try:
            script = open(filename, encoding="utf-8")
        except OSError:
            print(
                f"Input file, {filename}, failed to open! "
                "Check permissions/file contents!"
            )
            return 0
        with script, open(_OUTPUT_FILE, "w", encoding="utf-8") as out:
            Shell(out).run(script, interactive=False)
        return 0
    print(_USAGE)
    return 0