"""Cut a clip out of a transcript by UUID range, time range or last N entries."""

import logging

from cast_loader import get_timestamp, get_uuid, parse_timestamp, sort_by_timestamp

logger = logging.getLogger(__name__)


def is_renderable_for_clip(entry):
    entry_type = entry.get("type")
    if entry_type in ("user", "assistant"):
        return True
    if entry_type == "system":
        return entry.get("content") is not None
    if entry_type == "queue-operation":
        # A removed queue item is the user steering mid-turn
        return entry.get("operation") == "remove"
    return False


def extract_clip(entries, start_uuid=None, end_uuid=None, start_time=None, end_time=None, last=None):
    """Select entries in timestamp order.

    ``last`` wins over everything else and counts only renderable entries.
    Otherwise the UUID range applies first, then the time range. Bounds
    are inclusive; an unknown UUID leaves its side open.
    """
    selected = sort_by_timestamp(entries)

    if last is not None:
        if last <= 0:
            return []
        renderable = [entry for entry in selected if is_renderable_for_clip(entry)]
        return renderable[-last:]

    if start_uuid or end_uuid:
        selected = _filter_by_uuid_range(selected, start_uuid, end_uuid)

    if start_time or end_time:
        selected = _filter_by_time_range(selected, start_time, end_time)

    logger.debug("Clip keeps %d of %d entries", len(selected), len(entries))
    return selected


def _index_of(entries, uuid):
    for index, entry in enumerate(entries):
        if get_uuid(entry) == uuid:
            return index
    logger.warning("UUID %s not found in transcript", uuid)
    return None


def _filter_by_uuid_range(entries, start_uuid, end_uuid):
    start = 0
    end = len(entries)
    if start_uuid:
        index = _index_of(entries, start_uuid)
        if index is not None:
            start = index
    if end_uuid:
        index = _index_of(entries, end_uuid)
        if index is not None:
            end = index + 1
    return entries[start:end]


def _filter_by_time_range(entries, start_time, end_time):
    start = parse_timestamp(start_time) if start_time else None
    end = parse_timestamp(end_time) if end_time else None

    kept = []
    for entry in entries:
        timestamp = get_timestamp(entry)
        # Entries without a timestamp are kept
        if timestamp is not None:
            if start and timestamp < start:
                continue
            if end and timestamp > end:
                continue
        kept.append(entry)
    return kept


def get_clip_summary(entries):
    summary = {
        "total": len(entries),
        "user": 0,
        "assistant": 0,
        "tools": 0,
        "start_time": None,
        "end_time": None,
    }
    for entry in entries:
        timestamp = get_timestamp(entry)
        if timestamp:
            if summary["start_time"] is None or timestamp < summary["start_time"]:
                summary["start_time"] = timestamp
            if summary["end_time"] is None or timestamp > summary["end_time"]:
                summary["end_time"] = timestamp

        entry_type = entry.get("type")
        if entry_type == "user":
            if entry.get("toolUseResult"):
                summary["tools"] += 1
            else:
                summary["user"] += 1
        elif entry_type == "assistant":
            summary["assistant"] += 1
    return summary
