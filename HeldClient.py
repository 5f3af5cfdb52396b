# HeldClient.py
from __future__ import annotations

import argparse
import atexit
import logging
from pathlib import Path

try:
    import readline
except ImportError:  # pragma: no cover
    readline = None  # type: ignore[assignment]  # Windows

from heldcli.config import ConfigError, apply_overrides, load_config
from heldcli.core import PROMPT, init_core
from heldcli.logsetup import configure_logging
from heldcli.modules.deref import Dereferencer
from heldcli.modules.held import HeldEndpoint, HeldLookupClient

logger = logging.getLogger("heldcli")

HISTORY_FILE = Path.home() / ".held_client_history"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="held-client", description="GridGears HELD command line client")
    p.add_argument("-u", "--uri", help="uri used for connection")
    p.add_argument(
        "-H", "--header", action="append", default=[], metavar="NAME:VALUE",
        help="custom header sent with every request (repeatable)",
    )
    p.add_argument("-c", "--config", type=Path, help="JSON config file (default: config/held.json)")
    p.add_argument("--log-level", help="DEBUG, INFO, WARNING, ...")
    return p


def _setup_history() -> None:
    if readline is None:
        return
    try:
        readline.read_history_file(HISTORY_FILE)
    except (FileNotFoundError, OSError):
        pass
    readline.set_history_length(1000)
    atexit.register(readline.write_history_file, HISTORY_FILE)


def banner() -> None:
    print()
    print()
    print("*********************************")
    print("GridGears HELD Commandline Client")
    print("*********************************")


def repl(core) -> None:
    core.execute("help")
    while True:
        try:
            line = input(PROMPT)
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not core.execute(line):
            break


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_config(args.config)
        cfg = apply_overrides(cfg, uri=args.uri, headers=args.header, log_level=args.log_level)
    except ConfigError as e:
        parser.error(str(e))
    if not cfg.uri:
        parser.error("a HELD uri is required (-u or config.uri)")

    configure_logging(cfg.log_level, cfg.log_file)

    client = HeldLookupClient(HeldEndpoint(cfg.uri, headers=cfg.headers, timeout_s=cfg.timeout_s))
    deref = Dereferencer(headers=cfg.headers, timeout_s=cfg.deref_timeout_s)
    core = init_core(client=client, deref=deref, cfg=cfg)
    logger.info("connected to %s", cfg.uri)

    _setup_history()
    banner()
    try:
        repl(core)
    finally:
        core.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
