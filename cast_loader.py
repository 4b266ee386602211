"""Load Claude JSONL transcripts, pulling in sub-agent transcripts."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_line(line):
    stripped = line.strip()
    if not stripped:
        return None
    try:
        entry = json.loads(stripped)
    except json.JSONDecodeError as e:
        logger.debug("Skipping malformed line: %s", e)
        return None
    if not isinstance(entry, dict):
        logger.debug("Skipping non-object line")
        return None
    return entry


def _agent_id(entry):
    if entry.get("type") != "user":
        return None
    result = entry.get("toolUseResult")
    if not isinstance(result, dict):
        return None
    agent_id = result.get("agentId")
    return agent_id if isinstance(agent_id, str) and agent_id else None


def load_transcript(path, load_agents=True, agent_cache=None):
    """Read a transcript, inserting sub-agent entries after the result that spawned them.

    Agent transcripts live next to the main file as ``agent-<id>.jsonl``;
    missing ones are skipped.
    """
    path = Path(path)
    if agent_cache is None:
        agent_cache = {}

    entries = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            entry = parse_line(line)
            if entry is None:
                continue
            entries.append(entry)

            agent_id = _agent_id(entry) if load_agents else None
            if agent_id is None:
                continue

            if agent_id not in agent_cache:
                # Mark first so a self-referencing agent file cannot recurse forever
                agent_cache[agent_id] = []
                agent_path = path.parent / f"agent-{agent_id}.jsonl"
                try:
                    agent_cache[agent_id] = load_transcript(agent_path, True, agent_cache)
                except OSError as e:
                    logger.debug("Agent transcript %s unavailable: %s", agent_path, e)

            for agent_entry in agent_cache[agent_id]:
                agent_entry["isSidechain"] = True
                entries.append(agent_entry)

    logger.debug("Loaded %d entries from %s", len(entries), path)
    return interleave_tool_calls_and_results(entries)


def parse_timestamp(value):
    """Parse an ISO 8601 string into an aware datetime; naive values are taken as UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    ts = datetime.fromisoformat(value)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def get_timestamp(entry):
    value = entry.get("timestamp")
    if not isinstance(value, str) or not value:
        return None
    try:
        return parse_timestamp(value)
    except ValueError:
        return None


def get_uuid(entry):
    value = entry.get("uuid")
    return value if isinstance(value, str) and value else None


def sort_by_timestamp(entries):
    return sorted(entries, key=lambda e: get_timestamp(e) or EPOCH)


def is_renderable_message(entry):
    entry_type = entry.get("type")
    if entry_type in ("user", "assistant"):
        return True
    if entry_type == "system":
        return entry.get("content") is not None
    return False


def _is_tool_call(entry):
    if entry.get("type") != "assistant":
        return False
    message = entry.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, list):
        return False
    return any(isinstance(item, dict) and item.get("type") == "tool_use" for item in content)


def _is_tool_result(entry):
    return entry.get("type") == "user" and "toolUseResult" in entry


def interleave_tool_calls_and_results(entries):
    """Reorder [call1, call2, result1, result2] runs into call/result pairs.

    Results are matched to calls by position; leftovers keep their order.
    """
    ordered = []
    i = 0
    while i < len(entries):
        calls = []
        while i < len(entries) and _is_tool_call(entries[i]):
            calls.append(entries[i])
            i += 1

        results = []
        while i < len(entries) and _is_tool_result(entries[i]):
            results.append(entries[i])
            i += 1

        if calls and results:
            pairs = min(len(calls), len(results))
            for call, result in zip(calls, results):
                ordered.append(call)
                ordered.append(result)
            ordered.extend(calls[pairs:])
            ordered.extend(results[pairs:])
        else:
            ordered.extend(calls)
            ordered.extend(results)

        if not calls and not results and i < len(entries):
            ordered.append(entries[i])
            i += 1

    return ordered
