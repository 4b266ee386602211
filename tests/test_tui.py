import asyncio
import json

from textual.widgets import Input

from cast_builder import parse_cast
from cast_config import PROFILE_FILENAME
from cast_tui import SessionCastApp, default_output_name, preview_lines, session_from_path

ENTRIES = [
    {"type": "user", "uuid": "u1", "timestamp": "2025-03-01T12:00:00Z", "message": {"content": "hello"}},
    {"type": "assistant", "uuid": "a1", "timestamp": "2025-03-01T12:00:02Z",
     "message": {"content": [{"type": "text", "text": "Hi there"}]}},
]


def write_session(directory):
    path = directory / "abcdef123456.jsonl"
    path.write_text("\n".join(json.dumps(e) for e in ENTRIES) + "\n", encoding="utf-8")
    return path


def test_session_from_path(tmp_path):
    session = session_from_path(write_session(tmp_path))
    assert session["name"] == "abcdef123456"
    assert session["size"] > 0


def test_preview_lines(tmp_path):
    assert preview_lines(write_session(tmp_path)) == ["> hello", "Claude: Hi there"]
    assert preview_lines(tmp_path / "missing.jsonl") == []


def test_default_output_name():
    name = default_output_name({"name": "abcdef123456"})
    assert name.startswith("abcdef12-")
    assert name.endswith(".cast")


def test_generate_and_save_profile(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    session = write_session(tmp_path)

    async def scenario():
        app = SessionCastApp(session_path=str(session))
        async with app.run_test() as pilot:
            await pilot.pause()
            app.query_one("#output-input", Input).value = "picked.cast"
            app.query_one("#cols-input", Input).value = "90"
            app.run_generate()
            app.run_save_profile()

    asyncio.run(scenario())

    document = parse_cast((tmp_path / "picked.cast").read_text(encoding="utf-8"))
    assert document["header"]["term"]["cols"] == 90
    profile = json.loads((tmp_path / PROFILE_FILENAME).read_text(encoding="utf-8"))
    assert profile["cols"] == 90
    assert profile["output"] == "picked.cast"
