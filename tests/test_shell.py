import io
import os

import pytest

from sysplay.shell import Shell, main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_mkdir_and_pwd_in_one_line(workdir):
    out = io.StringIO()
    shell = Shell(out)
    assert shell.execute_line("mkdir foo; pwd\n") is True
    assert (workdir / "foo").is_dir()
    assert out.getvalue() == os.getcwd() + "\n"


def test_exit_stops_processing(workdir):
    out = io.StringIO()
    shell = Shell(out)
    assert shell.execute_line("exit; mkdir never") is False
    assert not (workdir / "never").exists()


def test_exit_with_argument_is_unrecognized(workdir):
    out = io.StringIO()
    assert Shell(out).execute(["exit", "now"]) is True
    assert out.getvalue() == "Error! Unrecognized command: exit\n"


def test_unknown_command(workdir):
    out = io.StringIO()
    Shell(out).execute_line("frobnicate x")
    assert "Error! Unrecognized command: frobnicate" in out.getvalue()


def test_missing_argument_reports_usage(workdir):
    out = io.StringIO()
    Shell(out).execute(["mkdir"])
    assert "Mkdir command requires argument" in out.getvalue()
    assert list(workdir.iterdir()) == []


def test_command_error_is_reported_not_raised(workdir):
    out = io.StringIO()
    shell = Shell(out)
    shell.execute(["mkdir", "dup"])
    shell.execute(["mkdir", "dup"])
    assert out.getvalue() == "Directory already exists!\n"


def test_cat_and_cp(workdir):
    (workdir / "a.txt").write_text("hello\n")
    out = io.StringIO()
    Shell(out).execute_line("cp a.txt b.txt; cat b.txt")
    assert (workdir / "b.txt").read_text() == "hello\n"
    assert out.getvalue() == "hello\n"


def test_run_script_ends_with_farewell(workdir):
    out = io.StringIO()
    Shell(out).run(io.StringIO("mkdir d\ncd d\npwd\n"))
    text = out.getvalue()
    assert text.endswith("End of file\nBye Bye!\n")
    assert str(workdir / "d") in text


def test_run_script_exit_skips_farewell(workdir):
    out = io.StringIO()
    Shell(out).run(io.StringIO("exit\nmkdir later\n"))
    assert "Bye Bye!" not in out.getvalue()
    assert not (workdir / "later").exists()


def test_run_interactive_prompts(workdir):
    out = io.StringIO()
    Shell(out).run(io.StringIO("pwd\nexit\n"), interactive=True)
    assert out.getvalue().count(">>>") == 2


def test_main_file_mode_writes_output(workdir):
    script = workdir / "script.txt"
    script.write_text("mkdir made\nls\n")
    assert main(["-f", str(script)]) == 0
    output = (workdir / "output.txt").read_text()
    assert "made" in output
    assert output.endswith("End of file\nBye Bye!\n")


def test_main_missing_input_file(workdir, capsys):
    assert main(["-f", "absent.txt"]) == 0
    assert "Input file, absent.txt, failed to open!" in capsys.readouterr().out


def test_main_bad_arguments_prints_usage(workdir, capsys):
    assert main(["-x"]) == 0
    assert "Usage: ./pseudo-shell [-f {filename}]" in capsys.readouterr().out