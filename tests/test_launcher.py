import io
import os
import signal
from unittest import mock

from sysplay.launcher import (
    launch_all,
    main_launch,
    main_signalled,
    read_command_lines,
    run_launch,
    run_signalled,
    signal_all,
)


def _reap(pid):
    return os.waitstatus_to_exitcode(os.waitpid(pid, 0)[1])


def test_read_command_lines(tmp_path):
    path = tmp_path / "cmds.txt"
    path.write_text("ls -l\necho a  b\nsleep 1")
    assert read_command_lines(path) == [["ls", "-l"], ["echo", "a", "b"], ["sleep", "1"]]


def test_read_command_lines_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("")
    assert read_command_lines(path) == []


def test_run_launch_reports_exit_codes(tmp_path):
    path = tmp_path / "cmds.txt"
    path.write_text("true\nfalse\n")
    out = io.StringIO()
    assert run_launch(path, out) == [0, 1]
    assert out.getvalue().count("Child process created with pid <") == 2


def test_unrunnable_command_exits_with_failure(tmp_path):
    path = tmp_path / "cmds.txt"
    path.write_text("no-such-program-for-sure-here\n")
    assert run_launch(path, io.StringIO()) == [255]


def test_launch_all_logs_each_pid():
    out = io.StringIO()
    pids = launch_all([["true"], ["true"]], out, False)
    codes = [_reap(pid) for pid in pids]
    assert codes == [0, 0]
    for pid in pids:
        assert f"Child process created with pid <{pid}>" in out.getvalue()


def test_held_child_waits_for_sigusr1():
    out = io.StringIO()
    (pid,) = launch_all([["true"]], out, True)
    assert os.waitpid(pid, os.WNOHANG) == (0, 0)
    signal_all([pid], signal.SIGUSR1, out, 0)
    assert _reap(pid) == 0


def test_signal_all_sends_and_logs():
    out = io.StringIO()
    (pid,) = launch_all([["sleep", "5"]], io.StringIO(), False)
    signal_all([pid], signal.SIGTERM, out, 0)
    assert _reap(pid) == -signal.SIGTERM
    expected = (
        f"Parent process: <{os.getpid()}> - Sending signal: "
        f"<{signal.strsignal(signal.SIGTERM)}> to child process: <{pid}>\n"
    )
    assert out.getvalue() == expected


def test_run_signalled_interrupts_children(tmp_path):
    path = tmp_path / "cmds.txt"
    path.write_text("sleep 5\nsleep 5\n")
    out = io.StringIO()
    with mock.patch("time.sleep") as sleeper:
        codes = run_signalled(path, out)
    assert codes == [-signal.SIGINT, -signal.SIGINT]
    assert sleeper.call_count == 4
    assert out.getvalue().count("Parent process: <") == 8


def test_main_launch_usage(capsys):
    assert main_launch([]) == 0
    assert "Usage: ./MCP {filename}" in capsys.readouterr().err


def test_main_launch_missing_file(tmp_path, capsys):
    assert main_launch([str(tmp_path / "absent.txt")]) == 0
    assert "File failed to open! Check permissions on file!" in capsys.readouterr().err


def test_main_signalled_missing_file(tmp_path, capsys):
    assert main_signalled([str(tmp_path / "absent.txt")]) == 0
    assert "File failed to open!" in capsys.readouterr().err


def test_main_launch_runs_file(tmp_path, capsys):
    path = tmp_path / "cmds.txt"
    path.write_text("true\n")
    assert main_launch([str(path)]) == 0
    assert "Child process created with pid <" in capsys.readouterr().out