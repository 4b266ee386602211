import pytest

from cast_clip import extract_clip, get_clip_summary, is_renderable_for_clip


def make_entries(count=10):
    entries = []
    for index in range(count):
        entries.append({
            "type": "user" if index % 2 == 0 else "assistant",
            "uuid": f"u{index}",
            "timestamp": f"2025-01-01T00:00:{index:02d}Z",
            "message": {"content": f"message {index}"},
        })
    return entries


def uuids(entries):
    return [entry["uuid"] for entry in entries]


def test_last_n():
    assert uuids(extract_clip(make_entries(), last=2)) == ["u8", "u9"]


def test_last_skips_unrenderable_entries():
    entries = make_entries(3) + [{"type": "summary", "uuid": "s", "timestamp": "2025-01-01T00:01:00Z"}]
    assert uuids(extract_clip(entries, last=1)) == ["u2"]


def test_last_zero_is_empty():
    assert extract_clip(make_entries(), last=0) == []


def test_last_takes_priority():
    clip = extract_clip(make_entries(), start_uuid="u0", end_uuid="u5", last=1)
    assert uuids(clip) == ["u9"]


def test_uuid_range_is_inclusive():
    assert uuids(extract_clip(make_entries(), start_uuid="u3", end_uuid="u5")) == ["u3", "u4", "u5"]


def test_unknown_uuid_leaves_bound_open():
    assert uuids(extract_clip(make_entries(), start_uuid="nope", end_uuid="u1")) == ["u0", "u1"]


def test_time_range():
    clip = extract_clip(
        make_entries(),
        start_time="2025-01-01T00:00:07Z",
        end_time="2025-01-01T00:00:08Z",
    )
    assert uuids(clip) == ["u7", "u8"]


def test_invalid_time_raises():
    with pytest.raises(ValueError):
        extract_clip(make_entries(), start_time="yesterday")


def test_clip_is_sorted_by_timestamp():
    entries = list(reversed(make_entries(4)))
    assert uuids(extract_clip(entries)) == ["u0", "u1", "u2", "u3"]


def test_queue_remove_is_renderable():
    assert is_renderable_for_clip({"type": "queue-operation", "operation": "remove"})
    assert not is_renderable_for_clip({"type": "queue-operation", "operation": "enqueue"})


def test_summary():
    entries = make_entries(4) + [{"type": "user", "toolUseResult": {"stdout": "x"}}]
    summary = get_clip_summary(entries)
    assert summary["total"] == 5
    assert summary["user"] == 2
    assert summary["assistant"] == 2
    assert summary["tools"] == 1
    assert summary["start_time"].second == 0
    assert summary["end_time"].second == 3
