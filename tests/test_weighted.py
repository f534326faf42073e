import pytest

from sysplay.weighted import JobKind, allocation_summary, classify, main, quantum_for


@pytest.mark.parametrize(
    "program, kind",
    [
        ("./cpubound", JobKind.COMPUTE),
        ("./iobound", JobKind.IO),
        ("ls", JobKind.COMMAND),
        ("cpubound", JobKind.COMMAND),
        ("", JobKind.COMMAND),
    ],
)
def test_classify(program, kind):
    assert classify(program) is kind


@pytest.mark.parametrize(
    "kind, seconds",
    [(JobKind.COMMAND, 1), (JobKind.IO, 3), (JobKind.COMPUTE, 5)],
)
def test_quantum_for(kind, seconds):
    assert quantum_for(kind) == seconds


def test_quantum_grows_with_heavier_work():
    assert (
        quantum_for(JobKind.COMMAND)
        < quantum_for(JobKind.IO)
        < quantum_for(JobKind.COMPUTE)
    )


def test_labels():
    programs = ["ls", "./iobound", "./cpubound"]
    assert [classify(p).label for p in programs] == ["Command", "I/O", "Compute"]


def test_allocation_summary_lines():
    lines = allocation_summary().split("\n")
    assert len(lines) == len(JobKind)
    assert lines[0] == "Command receives 1 seconds per interval"
    assert lines[2] == "Compute receives 5 seconds per interval"


def test_allocation_summary_mentions_every_kind():
    summary = allocation_summary()
    for kind in JobKind:
        assert f"{kind.label} receives {kind.seconds} seconds" in summary


def test_main_usage(capsys):
    assert main([]) == 0
    assert "Usage: ./part5 {filename}" in capsys.readouterr().err


def test_main_too_many_arguments(capsys):
    assert main(["a", "b"]) == 0
    assert "Usage" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.txt")]) == 0
    assert "File failed to open!" in capsys.readouterr().err


def test_main_empty_file_does_nothing(tmp_path, capsys):
    path = tmp_path / "empty.txt"
    path.write_text("")
    assert main([str(path)]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""