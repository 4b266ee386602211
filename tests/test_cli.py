import json

import pytest

from cast_builder import parse_cast
from cast_config import PROFILE_FILENAME
from session_cast import describe_entry, main, select_session

ENTRIES = [
    {
        "type": "user",
        "uuid": "11111111-aaaa",
        "timestamp": "2025-03-01T12:00:00Z",
        "message": {"role": "user", "content": "list files"},
    },
    {
        "type": "assistant",
        "uuid": "22222222-bbbb",
        "timestamp": "2025-03-01T12:00:03Z",
        "message": {"role": "assistant", "content": [
            {"type": "tool_use", "id": "t1", "name": "Bash", "input": {"command": "ls"}},
        ]},
    },
    {
        "type": "user",
        "uuid": "33333333-cccc",
        "timestamp": "2025-03-01T12:00:04Z",
        "toolUseResult": {"stdout": "README.md"},
        "message": {"role": "user", "content": [{"type": "tool_result", "tool_use_id": "t1"}]},
    },
]


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def session_file(workdir):
    path = workdir / "session.jsonl"
    path.write_text("\n".join(json.dumps(e) for e in ENTRIES) + "\n", encoding="utf-8")
    return path


def test_cast_to_stdout(session_file, capsys):
    main(["cast", str(session_file)])
    document = parse_cast(capsys.readouterr().out)
    header = document["header"]
    assert header["version"] == 3
    assert header["title"] == "Claude Code Session (1 tool calls)"
    assert header["timestamp"] == 1740830400
    assert [e[2] for e in document["events"] if e[1] == "m"] == ["> list files", "● Bash(ls)"]


def test_cast_to_file(session_file, workdir, capsys):
    main(["cast", str(session_file), "-o", "out.cast", "--last", "1", "--markers", "none", "--cols", "80"])
    document = parse_cast((workdir / "out.cast").read_text(encoding="utf-8"))
    assert document["header"]["term"]["cols"] == 80
    assert not [e for e in document["events"] if e[1] == "m"]

    err = capsys.readouterr().err
    assert "Generated" in err
    assert "Messages: 1/1" in err


def test_quiet_suppresses_stats(session_file, capsys):
    main(["cast", str(session_file), "-o", "out.cast", "-q"])
    assert capsys.readouterr().err == ""


def test_profile_supplies_defaults(session_file, workdir, capsys):
    (workdir / PROFILE_FILENAME).write_text(json.dumps({"theme": "nord", "rows": 30}), encoding="utf-8")
    main(["cast", str(session_file), "--rows", "35"])
    header = parse_cast(capsys.readouterr().out)["header"]
    assert header["term"]["theme"]["bg"] == "#2e3440"
    assert header["term"]["rows"] == 35


def test_cast_files_are_rejected(workdir, capsys):
    (workdir / "demo.cast").write_text("{}", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["cast", "demo.cast"])
    assert exc.value.code == 1
    assert "already a .cast file" in capsys.readouterr().err


def test_missing_session_file(workdir, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["cast", "missing.jsonl"])
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_empty_clip_is_an_error(session_file, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["cast", str(session_file), "--last", "0"])
    assert exc.value.code == 1
    assert "No messages match" in capsys.readouterr().err


def test_invalid_time_is_an_error(session_file, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["cast", str(session_file), "--start-time", "yesterday"])
    assert exc.value.code == 1


def test_latest_without_sessions(workdir, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["cast", "--latest"])
    assert exc.value.code == 1
    assert "No sessions found" in capsys.readouterr().err


def test_bad_choice_is_a_usage_error(session_file):
    with pytest.raises(SystemExit) as exc:
        main(["cast", str(session_file), "--markers", "bogus"])
    assert exc.value.code == 2


def test_command_required():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_list(session_file, capsys):
    main(["list", str(session_file)])
    out = capsys.readouterr().out
    assert "11111111-a.." in out
    assert "tool-result" in out
    assert "[Bash]" in out
    assert "Total: 3 messages | User: 1 | Assistant: 1 | Tools: 1" in out


def test_sessions_without_project(workdir, capsys):
    main(["sessions"])
    assert "No sessions found" in capsys.readouterr().out


def test_describe_entry():
    assert describe_entry(ENTRIES[0]) == ("user", "list files")
    assert describe_entry(ENTRIES[1]) == ("assistant", "[Bash]")
    assert describe_entry(ENTRIES[2]) == ("tool-result", "(success)")
    assert describe_entry({"type": "user", "toolUseResult": "Error"}) == ("tool-result", "(error)")
    assert describe_entry({"type": "system", "content": "x" * 50}) == ("system", "x" * 40)


def test_select_session_reads_choice(session_file, monkeypatch):
    sessions = [{"path": str(session_file), "size": 100, "modified": 0, "project": "demo"}] * 2
    monkeypatch.setattr("builtins.input", lambda *args: "2")
    assert select_session(sessions) == str(session_file)


def test_select_session_exits_cleanly_on_eof(session_file, monkeypatch):
    def raise_eof(*args):
        raise EOFError

    monkeypatch.setattr("builtins.input", raise_eof)
    with pytest.raises(SystemExit) as exc:
        select_session([{"path": str(session_file), "size": 100, "modified": 0, "project": "demo"}])
    assert exc.value.code == 0
