"""Find Claude session transcripts under ~/.claude/projects."""

import json
import time
from pathlib import Path


def claude_projects_dir():
    return Path.home() / ".claude" / "projects"


def get_claude_project_path(cwd):
    """Claude stores a project's sessions under its path with every / turned into -."""
    return claude_projects_dir() / str(cwd).replace("/", "-")


def list_sessions(project_path):
    project_path = Path(project_path)
    if not project_path.is_dir():
        return []

    sessions = []
    for jsonl_file in project_path.glob("*.jsonl"):
        if jsonl_file.name.startswith("agent-"):
            continue
        file_stat = jsonl_file.stat()
        sessions.append({
            "path": str(jsonl_file),
            "name": jsonl_file.stem,
            "modified": file_stat.st_mtime,
            "size": file_stat.st_size,
        })

    sessions.sort(key=lambda s: s["modified"], reverse=True)
    return sessions


def get_latest_session(cwd):
    sessions = list_sessions(get_claude_project_path(cwd))
    return sessions[0]["path"] if sessions else None


def _project_name_from_dir(dir_name):
    parts = dir_name.lstrip("-").split("-")
    if parts:
        return parts[-1]
    return dir_name


def discover_sessions(project_filter=None):
    """Sessions across every project, newest first; near-empty files are left out."""
    projects_dir = claude_projects_dir()
    if not projects_dir.is_dir():
        return []

    sessions = []
    for project_dir in sorted(projects_dir.iterdir()):
        if not project_dir.is_dir():
            continue

        project_name = _project_name_from_dir(project_dir.name)
        if project_filter and project_filter.lower() not in project_name.lower():
            continue

        for session in list_sessions(project_dir):
            session["project"] = project_name
            session["project_dir"] = project_dir.name
            sessions.append(session)

    sessions.sort(key=lambda s: s["modified"], reverse=True)
    return [s for s in sessions if s["size"] > 1024]


def format_size(size_bytes):
    if size_bytes < 1024:
        return f"{size_bytes}B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f}KB"
    return f"{size_bytes / (1024 * 1024):.1f}MB"


def format_age(modified, now=None):
    if now is None:
        now = time.time()
    seconds = int(now - modified)
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def extract_preview(jsonl_path):
    """First prompt, branch and message counts of a session, for pickers."""
    timestamp = None
    git_branch = ""
    first_message = ""
    user_count = 0
    assistant_count = 0

    try:
        with open(jsonl_path, "r", encoding="utf-8") as f:
            for line in f:
                try:
                    data = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if not isinstance(data, dict):
                    continue
                record_type = data.get("type", "")

                if record_type == "user":
                    # Tool results are user entries too but not prompts
                    if data.get("toolUseResult"):
                        continue
                    user_count += 1
                    if timestamp is None:
                        timestamp = data.get("timestamp", "")
                        git_branch = data.get("gitBranch", "")
                    if not first_message:
                        first_message = _first_text(data.get("message"))
                elif record_type == "assistant":
                    assistant_count += 1
    except (OSError, UnicodeDecodeError):
        pass

    return {
        "timestamp": timestamp or "",
        "git_branch": git_branch or "",
        "first_message": first_message,
        "user_count": user_count,
        "assistant_count": assistant_count,
    }


def _first_text(message):
    if not isinstance(message, dict):
        return ""
    content = message.get("content", "")
    if isinstance(content, str):
        return content.strip()
    if isinstance(content, list):
        for block in content:
            if isinstance(block, dict) and block.get("type") == "text":
                return str(block.get("text") or "").strip()
    return ""
