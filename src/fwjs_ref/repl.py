"""Interactive REPL for FWJS, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .parser import ParseError
from .repl_highlight import FwjsLexer
from .runner import repl_eval, report_error
from .runtime import Environment, FwNull, FwjsRuntimeError
from .utils import apply_recursion_limit, debug_py_trace_enabled, set_debug_py_trace, stringify

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Comments are dropped before counting brackets.
_COMMENT_RE = re.compile(r"//[^\n]*|/\*[\s\S]*?\*/")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/env": ("List global bindings", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_OPEN = "({"
_CLOSE = ")}"


def bracket_depth(text: str) -> int:
    """Net count of unclosed ( and { in *text*; an open block comment counts as open."""
    stripped = _COMMENT_RE.sub("", text)

    if "/*" in stripped:
        return 1

    depth = 0

    for ch in stripped:
        if ch in _OPEN:
            depth += 1
        elif ch in _CLOSE:
            depth = max(depth - 1, 0)

    return depth


def needs_more_input(text: str) -> bool:
    return bracket_depth(text) > 0


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def handle_slash(line: str, env_box: list[Environment]) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/env":
        env = env_box[0]
        names = sorted(env.names())

        if not names:
            print("(no bindings)")

        for name in names:
            print(f"{name} = {stringify(env.resolve_var(name))}")
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            set_debug_py_trace(True)
        elif arg.lower() in ("off", "0", "false", "no"):
            set_debug_py_trace(False)
        elif arg == "":
            set_debug_py_trace(not debug_py_trace_enabled())
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        env_box[0] = Environment(source="")
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def _compute_indent(text: str) -> str:
    return " " * (4 * bracket_depth(text))


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    apply_recursion_limit()
    # Use a mutable box so /reset can swap the environment.
    env_box: list[Environment] = [Environment(source="")]

    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.lstrip().startswith("/") or not needs_more_input(text):
            buf.validate_and_handle()
            return

        buf.insert_text("\n" + _compute_indent(text))

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=FwjsLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("fwjs repl (Ctrl-D to exit, / for commands)")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, env_box):
            continue

        try:
            result = repl_eval(text, env_box[0])
        except (ParseError, FwjsRuntimeError) as exc:
            report_error(exc)
            continue
        except RecursionError:
            report_error(FwjsRuntimeError("Maximum recursion depth exceeded"))
            continue

        if not isinstance(result, FwNull):
            print(stringify(result))


if __name__ == "__main__":
    repl()
