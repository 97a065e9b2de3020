"""Interactive REPL for Y, powered by prompt_toolkit."""

from __future__ import annotations

import os
import re
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer import Lexer
from .repl_highlight import YLexer
from .runner import run_and_report
from .runtime import Environment, init_stdlib
from .token_types import TT
from .utils import debug_py_trace_enabled

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/debug": ("Toggle printing the macro-expanded program", "[on|off]"),
    "/help": ("List commands", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_DEPTH_OPEN = {TT.LPAR, TT.LSQB, TT.LBRACE, TT.HASHMAP}
_DEPTH_CLOSE = {TT.RPAR, TT.RSQB, TT.RBRACE}

class ReplState:
    def __init__(self, debug: bool = False):
        self.env = Environment()
        self.debug = debug

def needs_more_input(text: str) -> bool:
    """True while brackets are open or a backtick string is unterminated."""
    lexer = Lexer(text)
    depth = 0

    for tok in lexer.tokenize():
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth -= 1
        elif tok.type == TT.ERROR and tok.value == "unterminated string":
            return text[tok.offset] != '"'

    # a template hole still open at EOF
    return depth > 0 or bool(lexer.brackets)

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

def _parse_toggle(arg: str, current: bool) -> bool | None:
    if arg.lower() in ("on", "1", "true", "yes"):
        return True
    if arg.lower() in ("off", "0", "false", "no"):
        return False
    if arg == "":
        return not current
    return None

def handle_slash(line: str, state: ReplState) -> bool:
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

    if cmd == "/help":
        for name, (desc, hint) in _SLASH_CMDS.items():
            print(f"  {name} {hint}".ljust(24) + desc)
        return True

    if cmd == "/py-traceback":
        enabled = _parse_toggle(arg, debug_py_trace_enabled())
        if enabled is None:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        if enabled:
            os.environ["YY_DEBUG_PY_TRACE"] = "1"
        else:
            os.environ.pop("YY_DEBUG_PY_TRACE", None)

        print(f"Python traceback: {'on' if enabled else 'off'}")
        return True

    if cmd == "/debug":
        enabled = _parse_toggle(arg, state.debug)
        if enabled is None:
            print("Usage: /debug [on|off]", file=sys.stderr)
            return True

        state.debug = enabled
        print(f"Expansion dump: {'on' if enabled else 'off'}")
        return True

    if cmd == "/reset":
        state.env = Environment()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True

def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)

def eval_line(text: str, state: ReplState) -> int:
    return run_and_report(text, state.env, debug=state.debug)

def repl(debug: bool = False) -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    init_stdlib()
    state = ReplState(debug=debug)

    history = InMemoryHistory()
    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        if text.startswith("/") or not needs_more_input(text):
            buf.validate_and_handle()
            return

        buf.insert_text("\n")

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=YLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("yy repl — Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, state):
            continue

        eval_line(text, state)
