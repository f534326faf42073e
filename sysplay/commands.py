"""File-system commands used by the pseudo shell."""

from __future__ import annotations

import os
import shutil
from typing import TextIO

from sysplay.tokenizer import split_tokens

__all__ = [
    "CommandError",
    "list_dir",
    "show_current_dir",
    "make_dir",
    "change_dir",
    "copy_file",
    "move_file",
    "delete_file",
    "display_file",
]


class CommandError(Exception):
    """A shell command could not be carried out."""


def list_dir(out: TextIO) -> None:
    """Write the entries of the current directory, tab separated (``ls``)."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        raise CommandError("No directory inputted.") from exc
    try:
        names = os.listdir(cwd)
    except OSError as exc:
        raise CommandError("Error opening directory. Check permissions.") from exc
    for name in (os.curdir, os.pardir, *names):
        out.write(name + "\t")
    out.write("\n")


def show_current_dir(out: TextIO) -> None:
    """Write the current working directory (``pwd``)."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        raise CommandError("CWD command failed!") from exc
    out.write(cwd + "\n")


def make_dir(name: str) -> None:
    """Create a directory (``mkdir``)."""
    try:
        os.mkdir(name, 0o777)
    except OSError as exc:
        raise CommandError("Directory already exists!") from exc


def change_dir(name: str) -> None:
    """Change the working directory (``cd``)."""
    try:
        os.chdir(name)
    except OSError as exc:
        raise CommandError("CHDIR command failed!") from exc


def copy_file(source: str, destination: str) -> None:
    """Copy a file (``cp``).

    If ``destination`` is a directory, the copy keeps the source's file
    name inside it; otherwise ``destination`` is the new file's path.
    """
    try:
        src = open(source, "rb")
    except OSError as exc:
        raise CommandError("CP command failed! Failed to open source file!") from exc
    with src:
        if os.path.isdir(destination):
            parts = split_tokens(source, "/")
            target = os.path.join(destination, parts[-1] if parts else source)
        else:
            target = destination
        try:
            fd = os.open(target, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o744)
        except OSError as exc:
            raise CommandError(
                "CP command failed! Failed to open destination file!"
            ) from exc
        with os.fdopen(fd, "wb") as dst:
            shutil.copyfileobj(src, dst)


def move_file(source: str, destination: str) -> None:
    """Rename or move a file (``mv``)."""
    try:
        os.rename(source, destination)
    except OSError as exc:
        raise CommandError("MV command failed!") from exc


def delete_file(name: str) -> None:
    """Remove a file (``rm``)."""
    try:
        os.unlink(name)
    except OSError as exc:
        raise CommandError(
            "RM command failed! File not found or permission need to be changed!"
        ) from exc


def display_file(name: str, out: TextIO) -> None:
    """Write the contents of a file (``cat``)."""
    try:
        handle = open(name, encoding="utf-8", errors="replace")
    except OSError as exc:
        raise CommandError("CAT command failed! Failed to open file!") from exc
    with handle:
        try:
            shutil.copyfileobj(handle, out)
        except OSError as exc:
            raise CommandError("CAT command failed! Failed to open file!") from exc