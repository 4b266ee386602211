import json
from datetime import datetime, timezone

import pytest

from cast_loader import (
    get_timestamp,
    interleave_tool_calls_and_results,
    is_renderable_message,
    load_transcript,
    parse_line,
    parse_timestamp,
    sort_by_timestamp,
)


def write_jsonl(path, entries, extra_lines=()):
    lines = [json.dumps(entry) for entry in entries]
    lines.extend(extra_lines)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def call(uuid):
    return {
        "type": "assistant",
        "uuid": uuid,
        "message": {"content": [{"type": "tool_use", "id": uuid, "name": "Bash", "input": {}}]},
    }


def result(uuid):
    return {"type": "user", "uuid": uuid, "toolUseResult": {"stdout": uuid}, "message": {"content": []}}


def test_parse_line():
    assert parse_line("") is None
    assert parse_line("{broken") is None
    assert parse_line("[1, 2]") is None
    assert parse_line('{"type": "user"}') == {"type": "user"}


def test_malformed_lines_are_skipped(tmp_path):
    path = write_jsonl(tmp_path / "s.jsonl", [{"type": "user", "uuid": "a"}], ["not json", ""])
    assert [e["uuid"] for e in load_transcript(path)] == ["a"]


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        load_transcript(tmp_path / "missing.jsonl")


def test_agent_entries_follow_their_result(tmp_path):
    write_jsonl(tmp_path / "agent-abc.jsonl", [{"type": "assistant", "uuid": "agent-1", "message": {"content": []}}])
    path = write_jsonl(tmp_path / "main.jsonl", [
        {"type": "user", "uuid": "u1", "message": {"content": "go"}},
        {"type": "user", "uuid": "r1", "toolUseResult": {"agentId": "abc"}, "message": {"content": []}},
        {"type": "assistant", "uuid": "a2", "message": {"content": []}},
    ])

    entries = load_transcript(path)
    assert [e["uuid"] for e in entries] == ["u1", "r1", "agent-1", "a2"]
    assert entries[2]["isSidechain"] is True

    without = load_transcript(path, load_agents=False)
    assert [e["uuid"] for e in without] == ["u1", "r1", "a2"]


def test_missing_agent_file_is_tolerated(tmp_path):
    path = write_jsonl(tmp_path / "main.jsonl", [
        {"type": "user", "uuid": "r1", "toolUseResult": {"agentId": "gone"}, "message": {"content": []}},
    ])
    assert [e["uuid"] for e in load_transcript(path)] == ["r1"]


def test_self_referencing_agent_does_not_recurse(tmp_path):
    write_jsonl(tmp_path / "agent-loop.jsonl", [
        {"type": "user", "uuid": "inner", "toolUseResult": {"agentId": "loop"}, "message": {"content": []}},
    ])
    path = write_jsonl(tmp_path / "main.jsonl", [
        {"type": "user", "uuid": "outer", "toolUseResult": {"agentId": "loop"}, "message": {"content": []}},
    ])
    assert [e["uuid"] for e in load_transcript(path)] == ["outer", "inner"]


def test_interleave_pairs_calls_with_results():
    entries = [call("c1"), call("c2"), result("r1"), result("r2"), {"type": "user", "uuid": "u"}]
    ordered = interleave_tool_calls_and_results(entries)
    assert [e["uuid"] for e in ordered] == ["c1", "r1", "c2", "r2", "u"]


def test_interleave_keeps_leftovers_in_order():
    entries = [call("c1"), call("c2"), call("c3"), result("r1")]
    ordered = interleave_tool_calls_and_results(entries)
    assert [e["uuid"] for e in ordered] == ["c1", "r1", "c2", "c3"]


def test_timestamps():
    assert parse_timestamp("2025-01-01T10:00:00Z") == datetime(2025, 1, 1, 10, tzinfo=timezone.utc)
    assert parse_timestamp("2025-01-01T10:00:00").tzinfo is not None
    assert get_timestamp({"timestamp": "garbage"}) is None
    assert get_timestamp({}) is None
    with pytest.raises(ValueError):
        parse_timestamp("garbage")


def test_sort_by_timestamp_puts_missing_first():
    entries = [
        {"uuid": "b", "timestamp": "2025-01-01T00:00:02Z"},
        {"uuid": "none"},
        {"uuid": "a", "timestamp": "2025-01-01T00:00:01Z"},
    ]
    assert [e["uuid"] for e in sort_by_timestamp(entries)] == ["none", "a", "b"]


def test_is_renderable_message():
    assert is_renderable_message({"type": "user"})
    assert is_renderable_message({"type": "system", "content": "x"})
    assert not is_renderable_message({"type": "system"})
    assert not is_renderable_message({"type": "summary"})
