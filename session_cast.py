#!/usr/bin/env python3
"""Claude session JSONL transcript to asciicast v3 recording converter."""

import argparse
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cast_builder import serialize_cast
from cast_clip import extract_clip, get_clip_summary
from cast_config import build_convert_kwargs, load_profile, merge_options
from cast_content import extract_text, extract_tool_use, message_content
from cast_convert import convert_to_cast, generate_title, get_session_info
from cast_loader import get_timestamp, get_uuid, is_renderable_message, load_transcript
from cast_markers import MARKER_MODES
from cast_sessions import (
    discover_sessions,
    extract_preview,
    format_age,
    format_size,
    get_claude_project_path,
    get_latest_session,
    list_sessions,
)
from cast_theme import RENDER_THEMES
from cast_timing import TIMING_PRESETS

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

TYPE_COLORS = {
    "user": "blue",
    "assistant": "magenta",
    "system": "yellow",
    "tool-result": "green",
}


class CommandError(Exception):
    """A user-facing failure; main() prints it and exits 1."""

    def __init__(self, message, hint=None):
        super().__init__(message)
        self.hint = hint


# ---------------------------------------------------------------------------
# Session selection
# ---------------------------------------------------------------------------

def select_session(sessions):
    if not sessions:
        raise CommandError("No sessions found in ~/.claude/projects/")

    filtered_sessions = []
    previews = []
    for session in sessions:
        preview = extract_preview(session["path"])
        if preview["user_count"] + preview["assistant_count"] == 0:
            continue
        filtered_sessions.append(session)
        previews.append(preview)
    sessions = filtered_sessions

    if not sessions:
        raise CommandError("No sessions with messages found in ~/.claude/projects/")

    table = Table(box=None, header_style="bold", pad_edge=False)
    table.add_column("#", justify="right")
    table.add_column("Date")
    table.add_column("Branch", max_width=28, no_wrap=True)
    table.add_column("Project", max_width=14, no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Msgs", justify="right")
    table.add_column("First message", no_wrap=True)

    for index, (session, preview) in enumerate(zip(sessions, previews), 1):
        first_msg = preview["first_message"].replace("\n", " ")
        if len(first_msg) > 60:
            first_msg = first_msg[:58] + ".."
        table.add_row(
            str(index),
            _session_date(session, preview),
            escape(preview["git_branch"]),
            escape(session.get("project", "")),
            format_size(session["size"]),
            str(preview["user_count"] + preview["assistant_count"]),
            escape(first_msg),
        )

    err_console.print()
    err_console.print(table)
    err_console.print()

    while True:
        try:
            choice = err_console.input("Select session [1]: ", markup=False).strip()
        except (KeyboardInterrupt, EOFError):
            err_console.print()
            raise SystemExit(0)

        if not choice:
            choice = "1"
        try:
            num = int(choice)
        except ValueError:
            err_console.print("  Enter a number")
            continue
        if 1 <= num <= len(sessions):
            selected = sessions[num - 1]
            err_console.print(f"  -> {escape(selected['path'])}", style="dim")
            return selected["path"]
        err_console.print(f"  Enter a number between 1 and {len(sessions)}")


def _session_date(session, preview):
    timestamp_str = preview["timestamp"]
    if timestamp_str:
        try:
            dt = datetime.fromisoformat(timestamp_str.replace("Z", "+00:00"))
            return dt.astimezone().strftime("%Y-%m-%d %H:%M")
        except (ValueError, OSError):
            return timestamp_str[:16]
    return datetime.fromtimestamp(session["modified"]).strftime("%Y-%m-%d %H:%M")


def resolve_session_path(session, latest, project_filter=None):
    if latest:
        cwd = os.getcwd()
        path = get_latest_session(cwd)
        if path is None:
            raise CommandError(
                "No sessions found for current project",
                hint=f"Looked in: {get_claude_project_path(cwd)}",
            )
        return Path(path)
    if session:
        return Path(session).resolve()
    return Path(select_session(discover_sessions(project_filter=project_filter)))


# ---------------------------------------------------------------------------
# cast
# ---------------------------------------------------------------------------

def cast_options_from_args(args):
    return {
        "output": args.output,
        "theme": args.theme,
        "cols": args.cols,
        "rows": args.rows,
        "title": args.title,
        "preset": args.preset,
        "max_wait": args.max_wait,
        "thinking_pause": args.thinking_pause,
        "typing_effect": args.typing_effect,
        "status_spinner": args.status_spinner,
        "spinner_duration": args.spinner_duration,
        "markers": args.markers,
    }


def generate_cast(path, options, load_agents=True, clip=None):
    """Load, clip and convert one session; returns (serialized cast, stats)."""
    entries = load_transcript(path, load_agents=load_agents)
    if not entries:
        raise CommandError("No messages found in session file")

    selected = extract_clip(entries, **(clip or {}))
    if not selected:
        raise CommandError("No messages match the specified criteria")

    info = get_session_info(selected)
    kwargs = build_convert_kwargs(options, generate_title(info))
    if info["start_time"] is not None:
        kwargs["timestamp"] = int(info["start_time"].timestamp())

    result = convert_to_cast(selected, **kwargs)
    return serialize_cast(result.document), result.stats


def print_stats(stats, preset):
    err_console.print(
        f"  Messages: {stats['entries_rendered']}/{stats['entries_processed']} | "
        f"Events: {stats['events_generated']} | "
        f"Markers: {stats['markers_generated']} | "
        f"Duration: {stats['duration']:.1f}s | "
        f"Preset: {preset or 'default'}",
        style="dim",
    )


def cmd_cast(args):
    path = resolve_session_path(args.session, args.latest, args.project)
    if args.latest and not args.quiet:
        err_console.print(f"Using: {escape(str(path))}", style="dim")

    if path.suffix == ".cast":
        raise CommandError(
            "Input is already a .cast file",
            hint="Provide a .jsonl session file to convert",
        )

    options = merge_options(load_profile(), cast_options_from_args(args))
    clip = {
        "start_uuid": args.start_uuid,
        "end_uuid": args.end_uuid,
        "start_time": args.start_time,
        "end_time": args.end_time,
        "last": args.last,
    }
    content, stats = generate_cast(path, options, load_agents=not args.no_agents, clip=clip)

    if options["output"]:
        output_path = Path(options["output"]).resolve()
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(content)
        if not args.quiet:
            err_console.print(f"✓ Generated {escape(str(output_path))}", style="green")
            print_stats(stats, options["preset"])
    else:
        sys.stdout.write(content)
        sys.stdout.flush()


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------

def describe_entry(entry):
    """(type label, one-line preview) for the message listing."""
    entry_type = entry.get("type", "")
    preview = ""

    if entry_type == "user":
        result = entry.get("toolUseResult")
        if result:
            is_error = isinstance(result, str) or (isinstance(result, dict) and result.get("is_error"))
            return "tool-result", "(error)" if is_error else "(success)"
        content = message_content(entry)
        if isinstance(content, str):
            preview = content
    elif entry_type == "assistant":
        content = message_content(entry)
        tools = extract_tool_use(content)
        if tools:
            return entry_type, "[" + ", ".join(str(t.get("name", "")) for t in tools) + "]"
        preview = extract_text(content)
    elif entry_type == "system" and isinstance(entry.get("content"), str):
        preview = entry["content"]

    return entry_type, preview[:40].replace("\n", " ")


def cmd_list(args):
    path = Path(args.session).resolve()
    entries = load_transcript(path, load_agents=not args.no_agents)
    if not entries:
        console.print("No messages found in session file", style="yellow")
        return

    table = Table(box=None, header_style="bold", pad_edge=False)
    table.add_column("UUID", style="dim", no_wrap=True)
    table.add_column("TIME", style="dim", no_wrap=True)
    table.add_column("TYPE", no_wrap=True)
    table.add_column("CONTENT", no_wrap=True)

    for entry in entries:
        if not args.all and not is_renderable_message(entry):
            continue
        uuid = get_uuid(entry)
        timestamp = get_timestamp(entry)
        type_str, preview = describe_entry(entry)
        table.add_row(
            uuid[:10] + ".." if uuid else "",
            timestamp.strftime("%H:%M:%S") if timestamp else "",
            f"[{TYPE_COLORS.get(type_str, 'white')}]{escape(type_str)}[/]",
            escape(preview),
        )
    console.print(table)

    summary = get_clip_summary(entries)
    console.print("─" * 80)
    console.print(
        f"Total: {summary['total']} messages | "
        f"User: {summary['user']} | "
        f"Assistant: {summary['assistant']} | "
        f"Tools: {summary['tools']}",
        style="dim",
    )


# ---------------------------------------------------------------------------
# sessions / pick
# ---------------------------------------------------------------------------

def cmd_sessions(args):
    cwd = os.getcwd()
    project_path = get_claude_project_path(cwd)
    sessions = list_sessions(project_path)

    if not sessions:
        console.print("No sessions found", style="yellow")
        console.print(f"  Project path: {escape(str(project_path))}", style="dim")
        return

    console.print(f"Sessions for {escape(cwd)}", style="bold")
    console.print(escape(str(project_path)), style="dim")
    console.print()
    for session in sessions:
        age = format_age(session["modified"])
        console.print(
            f"[cyan]{escape(session['name'][:8])}[/cyan]"
            f"[dim]  {age:12}{format_size(session['size'])}[/dim]"
        )
    console.print()
    console.print("Use: session-cast cast --latest", style="dim")


def cmd_pick(args):
    # Imported lazily so the other commands do not pay for textual
    from cast_tui import run_picker

    session_path = None
    if args.session or args.latest:
        session_path = resolve_session_path(args.session, args.latest)
    run_picker(session_path=session_path, load_agents=not args.no_agents, project_filter=args.project)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_parser():
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    parser = argparse.ArgumentParser(
        prog="session-cast",
        description="Convert Claude Code session JSONL files to asciicast v3 recordings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  session-cast cast                               # -> session selector -> stdout
  session-cast cast --latest -o demo.cast         # -> most recent session of this project
  session-cast cast session.jsonl --last 10       # -> last 10 messages only
  session-cast list session.jsonl                 # -> UUIDs and timestamps for clipping
  session-cast pick                               # -> interactive picker
""")
    subparsers = parser.add_subparsers(dest="command", required=True)

    cast = subparsers.add_parser("cast", parents=[common], help="generate a recording from a session")
    cast.add_argument("session", nargs="?", default=None,
                      help="session JSONL file (omit to select interactively)")
    cast.add_argument("--latest", action="store_true", help="use the most recent session of the current project")
    cast.add_argument("--project", default=None, help="filter the selector by project name (substring match)")
    cast.add_argument("--start-uuid", help="start from message UUID")
    cast.add_argument("--end-uuid", help="end at message UUID")
    cast.add_argument("--last", type=int, help="last N messages")
    cast.add_argument("--start-time", help="start from timestamp (ISO 8601)")
    cast.add_argument("--end-time", help="end at timestamp (ISO 8601)")
    cast.add_argument("-o", "--output", help="output file path (default: stdout)")
    cast.add_argument("--theme", choices=sorted(RENDER_THEMES), default=None, help="color theme")
    cast.add_argument("--preset", choices=sorted(TIMING_PRESETS), default=None, help="timing preset")
    cast.add_argument("--max-wait", type=float, help="maximum pause between events in seconds")
    cast.add_argument("--thinking-pause", type=float, help="pause before assistant responses in seconds")
    cast.add_argument("--typing-effect", action="store_true", default=None, help="enable the typing effect")
    cast.add_argument("--no-status-spinner", dest="status_spinner", action="store_false", default=None,
                      help="disable the status spinner")
    cast.add_argument("--spinner-duration", type=float, help="spinner animation per gap in seconds (default: 3.0)")
    cast.add_argument("--cols", type=int, help="terminal width (default: 100)")
    cast.add_argument("--rows", type=int, help="terminal height (default: 40)")
    cast.add_argument("--markers", choices=MARKER_MODES, default=None, help="marker mode (default: all)")
    cast.add_argument("--title", help="recording title")
    cast.add_argument("--no-agents", action="store_true", help="exclude sub-agent messages")
    cast.add_argument("-q", "--quiet", action="store_true", help="suppress stats output")
    cast.set_defaults(func=cmd_cast)

    list_parser = subparsers.add_parser("list", parents=[common], help="list messages with UUIDs and timestamps")
    list_parser.add_argument("session", help="session JSONL file")
    list_parser.add_argument("--no-agents", action="store_true", help="exclude sub-agent messages")
    list_parser.add_argument("--all", action="store_true", help="include non-renderable entries")
    list_parser.set_defaults(func=cmd_list)

    sessions = subparsers.add_parser("sessions", parents=[common], help="list sessions of the current project")
    sessions.set_defaults(func=cmd_sessions)

    pick = subparsers.add_parser("pick", parents=[common], help="open the interactive picker")
    pick.add_argument("session", nargs="?", default=None, help="session JSONL file")
    pick.add_argument("--latest", action="store_true", help="use the most recent session of the current project")
    pick.add_argument("--project", default=None, help="filter sessions by project name (substring match)")
    pick.add_argument("--no-agents", action="store_true", help="exclude sub-agent messages")
    pick.set_defaults(func=cmd_pick)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
    logger.debug("Running %s", args.command)

    try:
        args.func(args)
    except CommandError as e:
        err_console.print(f"Error: {escape(str(e))}", style="red")
        if e.hint:
            err_console.print(f"  {escape(e.hint)}", style="dim")
        raise SystemExit(1)
    except (OSError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        err_console.print(f"Error: {escape(str(e))}", style="red")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
