"""Command-line option handling."""

from __future__ import annotations

import sys
from typing import Sequence

from .fn import LogType, log

__all__ = ["show_usage", "show_help", "parse_options"]

VERSION = "WIP dungeon"
OPTSTR = "-hVu"
_LONG = {"help": "h", "version": "V", "usage": "u"}


def show_usage(name: str) -> None:
    log(LogType.INFO, f"Usage: {name} {OPTSTR}")


def show_help(name: str) -> None:
    print(VERSION)
    show_usage(name)
    log(
        LogType.INFO,
        "\n\t-h, --help\t\tdisplay this help and exit\n"
        "\t-V, --version\t\tdisplay version information and exit\n"
        "\t-u, --usage\t\tdisplay usage and exit",
    )


def _run(option: str, name: str) -> None:
    if option == "h":
        show_help(name)
    elif option == "V":
        print(VERSION)
    else:
        show_usage(name)
    raise SystemExit(0)


def _fail(name: str, message: str) -> None:
    print(f"{name}: {message}", file=sys.stderr)
    raise SystemExit(1)


def parse_options(argv: Sequence[str] | None = None) -> str | None:
    """Handle options; return the first non-option argument, or None.

    Help, version and usage print and exit with status 0; an unknown
    option exits with status 1.
    """
    args = list(sys.argv if argv is None else argv)
    name = args[0] if args else "wipdungeon"
    for arg in args[1:]:
        if arg == "--":
            return None
        if arg.startswith("--"):
            opt, has_value, _ = arg[2:].partition("=")
            matches = [o for o in _LONG if o == opt] or [o for o in _LONG if o.startswith(opt)]
            if len(matches) != 1:
                _fail(name, f"unrecognized option '{arg}'")
            if has_value:
                _fail(name, f"option '--{matches[0]}' doesn't allow an argument")
            _run(_LONG[matches[0]], name)
        elif arg.startswith("-") and arg != "-":
            for ch in arg[1:]:
                if ch not in "hVu":
                    _fail(name, f"invalid option -- '{ch}'")
                _run(ch, name)
        else:
            return arg
    return None