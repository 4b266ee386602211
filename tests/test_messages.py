from cast_ansi import strip_ansi
from cast_messages import make_render_config, render_message
from cast_theme import DRACULA, TOKYO_NIGHT

CFG = make_render_config(width=60)


def plain(entry, cfg=CFG):
    return strip_ansi(render_message(entry, cfg))


def user(content, **extra):
    entry = {"type": "user", "message": {"role": "user", "content": content}}
    entry.update(extra)
    return entry


def assistant(*items):
    return {"type": "assistant", "message": {"role": "assistant", "content": list(items)}}


def test_make_render_config_ignores_none():
    cfg = make_render_config(theme=None, width=80)
    assert cfg["theme"] is TOKYO_NIGHT
    assert cfg["width"] == 80
    assert make_render_config(theme=DRACULA)["theme"] is DRACULA


def test_user_prompt():
    assert plain(user("hello there")) == "→ hello there"


def test_user_prompt_wraps():
    lines = plain(user("word " * 30)).split("\n")
    assert lines[0].startswith("→ ")
    assert all(line.startswith("  ") for line in lines[1:])


def test_meta_and_empty_entries_render_nothing():
    assert render_message(user("caveat", isMeta=True), CFG) == ""
    assert render_message(user("   "), CFG) == ""
    assert render_message({"type": "summary", "summary": "x"}, CFG) == ""
    assert render_message({"type": "file-history-snapshot"}, CFG) == ""


def test_interrupt():
    text = plain(user([{"type": "text", "text": "[Request interrupted by user]"}]))
    assert text == "⎿ Interrupted · What should Claude do instead?"


def test_slash_command():
    content = "<command-name>/model</command-name><command-args>opus</command-args>"
    assert plain(user(content)) == "→ /model (opus) "


def test_bash_input_and_output():
    content = "<bash-input>ls</bash-input><bash-stdout>a.txt</bash-stdout><bash-stderr></bash-stderr>"
    assert plain(user(content)) == "! ls \n  ⎿  a.txt"


def test_assistant_text_and_tool():
    text = plain(assistant(
        {"type": "text", "text": "Checking **now**"},
        {"type": "tool_use", "id": "t", "name": "Read", "input": {"file_path": "/tmp/a.py"}},
    ))
    assert text == "Checking now\n\n● Read(/tmp/a.py)"


def test_assistant_string_content():
    entry = {"type": "assistant", "message": {"content": "plain reply"}}
    assert plain(entry) == "plain reply"


def test_mcp_tool_name():
    text = plain(assistant({"type": "tool_use", "name": "mcp__chrome-devtools__click", "input": {"uid": "42"}}))
    assert text == '● chrome-devtools - click (MCP)(uid: "42")'


def test_thinking_can_be_hidden():
    entry = assistant({"type": "thinking", "thinking": "hmm"})
    assert plain(entry).startswith("∴ Thinking…")
    assert render_message(entry, make_render_config(show_thinking=False)) == ""


def test_todo_write_call_lists_items():
    entry = assistant({
        "type": "tool_use",
        "name": "TodoWrite",
        "input": {"todos": [
            {"content": "Write tests", "status": "completed", "activeForm": "Writing tests"},
            {"content": "Ship it", "status": "in_progress", "activeForm": "Shipping"},
        ]},
    })
    lines = plain(entry).split("\n")
    assert lines[0] == "● TodoWrite (updating todos)"
    assert lines[1] == "  ⎿  ☒ Write tests"
    assert lines[2] == "     ☐ Ship it"


def test_system_levels():
    assert plain({"type": "system", "level": "warning", "content": "slow"}) == "[warning] slow"
    assert plain({"type": "system", "content": "note"}) == "[system] note"


def test_queue_remove():
    entry = {"type": "queue-operation", "operation": "remove", "content": "also fix docs"}
    assert plain(entry) == "→ also fix docs"
    assert render_message({"type": "queue-operation", "operation": "enqueue", "content": "x"}, CFG) == ""


def test_tool_error_string_result():
    text = plain(user([{"type": "tool_result"}], toolUseResult="Error: file not found"))
    assert text == "  ⎿  Error: file not found"
