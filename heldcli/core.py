"""heldcli/core.py

Core runtime + init_core() wiring.

Important: avoid importing heldcli.topics (ALL_COMMANDS) at module import time,
topics import UsageError from here.
"""

from __future__ import annotations

import logging
import threading
from collections import deque

from heldcli.lib.tracker import RequestTracker
from heldcli.model.schema import TYPE_TOKENS
from heldcli.model.session import SessionState
from heldcli.render import ResultRenderer

logger = logging.getLogger(__name__)

PROMPT = "> "
JOURNAL_SIZE = 500


class UsageError(ValueError):
    pass


class Core:
    def __init__(self, client=None, deref=None):
        self.state = SessionState()
        self.tracker = RequestTracker()

        # collaborators: lookup client (find_location/close), dereferencer
        self.client = client
        self.deref = deref
        self.renderer = ResultRenderer(self)

        self.commands = {}   # cmd -> {handler, help, usage}
        self.log = deque(maxlen=JOURNAL_SIZE)   # recent {"in"}/{"out"} entries
        self.alias_mgr = None  # set in init_core()

        # ---- runtime gates ----
        # Serialize execute, lookup callbacks and console writes across threads
        self.exec_lock = threading.RLock()
        self.keep_running = True
        self.closed = False

    def register(self, name, handler, help_text="", usage=""):
        self.commands[name] = {"handler": handler, "help": help_text, "usage": usage}

    # ---- console ----
    def emit(self, *lines):
        with self.exec_lock:
            for line in lines:
                print(line, flush=True)

    def prompt(self):
        with self.exec_lock:
            print(PROMPT, end="", flush=True)
    # -----------------

    def execute(self, raw) -> bool:
        """Run one input line. Returns False once the session should end."""
        with self.exec_lock:
            self.log.append({"in": raw})

            parts = raw.strip().split()
            if not parts:
                return self.keep_running

            head = parts[0]
            if head != "last":
                self.state.last_command = raw

            # --- EXPOSED SURFACE GATE: only aliases + help ---
            if head != "help":
                if not self.alias_mgr or not self.alias_mgr.has_alias(head):
                    self._out(f"Unknown command: {head}")
                    return self.keep_running
                parts = self.alias_mgr.expand(parts)
            # ----------------------------------------------

            cmd, *args = parts
            entry = self.commands.get(cmd)
            if not entry:
                self._out(f"Unknown command: {cmd}")
                return self.keep_running

            try:
                out = entry["handler"](self, *args)
            except UsageError as e:
                out = f"Usage: {e}"
            except Exception as e:
                logger.exception("command failed: %s", raw)
                out = f"Error: {e}"

            if out is not None:
                self._out(out)
            return self.keep_running

    def _out(self, text):
        self.log.append({"out": text})
        self.emit(text)

    def shutdown(self):
        with self.exec_lock:
            if self.closed:
                return
            self.closed = True
            self.keep_running = False
        for c in (self.client, self.deref):
            close = getattr(c, "close", None)
            if close is not None:
                try:
                    close()
                except Exception:
                    logger.exception("close failed for %r", c)


# ---------- exposed help + quit ----------
def help_cmd(core, name=None):
    am = core.alias_mgr
    surface = am.list_aliases() if am else []

    if name:
        target = "help" if name == "help" else (am.get_alias(name) if am else None)
        entry = core.commands.get(target) if target else None
        if entry is None:
            return f"Unknown command: {name}"
        return f"{entry['usage']}\n\t{entry['help']}"

    lines = [""]
    seen = set()
    for alias in surface:
        target = am.get_alias(alias)
        entry = core.commands.get(target)
        if entry is None or target in seen:
            continue
        seen.add(target)
        lines.append(f"{entry['usage']:<28}{entry['help']}")
    lines.append(f"{'help [command]':<28}Print help")
    lines.append("")
    lines.append("Location types: " + ", ".join(f"{k}={v.value}" for k, v in TYPE_TOKENS.items()))
    return "\n".join(lines)


def quit_cmd(core, *_ignored):
    core.keep_running = False
    return None


def init_core(client=None, deref=None, cfg=None):
    # Late imports to avoid circular-import issues.
    from heldcli.aliases import ALIASES, AliasManager
    from heldcli.topics import ALL_COMMANDS

    core = Core(client=client, deref=deref)

    # register internal primitives
    for name, (handler, help_text, usage) in ALL_COMMANDS.items():
        core.register(name, handler, help_text, usage)
    core.register("sys.quit", quit_cmd, "Quit", "quit")

    # attach aliases
    core.alias_mgr = AliasManager(ALIASES)

    # exposed help
    core.register(
        "help",
        help_cmd,
        "Show available commands",
        "help [command]"
    )

    # initial session values
    if cfg is not None:
        core.state.verbose = cfg.verbose
        core.state.exact = cfg.exact
        selected = []
        for tok in cfg.location_types:
            t = TYPE_TOKENS.get(str(tok).lower())
            if t is None:
                logger.warning("ignoring unknown location type in config: %s", tok)
                continue
            selected.append(t)
        core.state.set_location_types(selected)

    return core
