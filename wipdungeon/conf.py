"""Configuration in libconfig syntax, looked up by dotted paths."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Mapping

from .fn import LogType, log

__all__ = ["ConfigError", "Config", "config_path", "load_config"]

GAME = "dungeon"


class ConfigError(Exception):
    """A configuration text could not be parsed."""

    def __init__(self, message: str, line: int = 0, source: str = "") -> None:
        super().__init__(f"{source}:{line} - {message}" if source else f"{line} - {message}")
        self.message = message
        self.line = line
        self.source = source


_LEXEME = re.compile(
    r"""
     (?P<ws>\s+|\#[^\n]*|//[^\n]*|/\*.*?\*/)
    |(?P<str>"(?:[^"\\]|\\.)*")
    |(?P<float>[-+]?(?:\d*\.\d+|\d+\.\d*)(?:[eE][-+]?\d+)?|[-+]?\d+[eE][-+]?\d+)
    |(?P<hex>0[xX][0-9A-Fa-f]+L{0,2})
    |(?P<int>[-+]?\d+L{0,2})
    |(?P<bool>(?i:true|false)\b)
    |(?P<name>[A-Za-z*][-A-Za-z0-9_*]*)
    |(?P<punct>[=:;,{}()\[\]])
    """,
    re.VERBOSE | re.DOTALL,
)
_ESCAPE = re.compile(r"\\(x[0-9A-Fa-f]{2}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "f": "\f", "\\": "\\", '"': '"'}


def _unescape(body: str) -> str:
    def repl(match: re.Match[str]) -> str:
        seq = match.group(1)
        if seq.startswith("x") and len(seq) == 3:
            return chr(int(seq[1:], 16))
        return _SIMPLE_ESCAPES.get(seq, seq)

    return _ESCAPE.sub(repl, body)


def _lex(text: str) -> list[tuple[str, str, int]]:
    lexemes = []
    pos, line = 0, 1
    while pos < len(text):
        match = _LEXEME.match(text, pos)
        if match is None:
            raise ConfigError("syntax error", line)
        kind = match.lastgroup
        if kind != "ws":
            lexemes.append((kind, match.group(), line))
        line += match.group().count("\n")
        pos = match.end()
    return lexemes


class _Parser:
    def __init__(self, text: str) -> None:
        self.lexemes = _lex(text)
        self.pos = 0

    def _peek(self):
        return self.lexemes[self.pos] if self.pos < len(self.lexemes) else None

    def _line(self) -> int:
        item = self._peek()
        return item[2] if item else (self.lexemes[-1][2] if self.lexemes else 1)

    def _next(self):
        item = self._peek()
        if item is None:
            raise ConfigError("syntax error: unexpected end of input", self._line())
        self.pos += 1
        return item

    def _at(self, punct: str) -> bool:
        item = self._peek()
        return item is not None and item[0] == "punct" and item[1] == punct

    def parse_group(self, closed: bool) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        while True:
            if self._peek() is None:
                if closed:
                    raise ConfigError("syntax error: missing '}'", self._line())
                return settings
            if closed and self._at("}"):
                self.pos += 1
                return settings
            kind, name, line = self._next()
            if kind != "name":
                raise ConfigError("syntax error", line)
            if not (self._at("=") or self._at(":")):
                raise ConfigError("syntax error", self._line())
            self.pos += 1
            value = self.parse_value()
            if self._at(";") or self._at(","):
                self.pos += 1
            if name in settings:
                raise ConfigError(f"duplicate setting name '{name}'", line)
            settings[name] = value

    def parse_value(self) -> Any:
        kind, text, line = self._next()
        if kind == "str":
            parts = [_unescape(text[1:-1])]
            while (item := self._peek()) is not None and item[0] == "str":
                parts.append(_unescape(item[1][1:-1]))
                self.pos += 1
            return "".join(parts)
        if kind == "int":
            return int(text.rstrip("L"), 10)
        if kind == "hex":
            return int(text.rstrip("L"), 16)
        if kind == "float":
            return float(text)
        if kind == "bool":
            return text.lower() == "true"
        if kind == "punct" and text == "{":
            return self.parse_group(closed=True)
        if kind == "punct" and text in "[(":
            return self.parse_sequence("]" if text == "[" else ")")
        raise ConfigError("syntax error", line)

    def parse_sequence(self, close: str) -> list[Any]:
        items: list[Any] = []
        if self._at(close):
            self.pos += 1
            return items
        while True:
            items.append(self.parse_value())
            if self._at(","):
                self.pos += 1
            elif self._at(close):
                self.pos += 1
                return items
            else:
                raise ConfigError("syntax error", self._line())


_MISSING = object()


def _is_kind(value: Any, kind: type) -> bool:
    if kind is int or kind is float:
        return type(value) is kind
    return isinstance(value, kind)


class Config:
    """Parsed configuration settings."""

    def __init__(self) -> None:
        self.settings: dict[str, Any] = {}

    def read_string(self, text: str) -> None:
        self.settings = _Parser(text).parse_group(closed=False)

    def read_file(self, path: str | Path) -> None:
        text = Path(path).read_text()
        try:
            self.read_string(text)
        except ConfigError as exc:
            raise ConfigError(exc.message, exc.line, str(path)) from None

    def _lookup(self, path: str) -> Any:
        node: Any = self.settings
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def _find(self, path: str, kind: type) -> bool:
        return _is_kind(self._lookup(path), kind)

    def _get(self, path: str, kind: type, default: Any, caller: str) -> Any:
        value = self._lookup(path)
        if not _is_kind(value, kind):
            log(LogType.WARN, f"{caller}: Can't find '{path}' in config.")
            return default
        return value

    def _set(self, path: str, kind: type, value: Any, caller: str) -> bool:
        parent_path, _, name = path.rpartition(".")
        parent = self._lookup(parent_path) if parent_path else self.settings
        if not isinstance(parent, dict) or name not in parent or not _is_kind(parent[name], kind):
            log(LogType.WARN, f"{caller}: Can't set '{path}': Not in config.")
            return False
        parent[name] = kind(value)
        return True

    def find_str(self, path: str) -> bool:
        return self._find(path, str)

    def get_str(self, path: str) -> str | None:
        return self._get(path, str, None, "get_str")

    def set_str(self, path: str, value: str) -> bool:
        return self._set(path, str, value, "set_str")

    def find_int(self, path: str) -> bool:
        return self._find(path, int)

    def get_int(self, path: str) -> int:
        return self._get(path, int, 0, "get_int")

    def set_int(self, path: str, value: int) -> bool:
        return self._set(path, int, value, "set_int")

    def find_float(self, path: str) -> bool:
        return self._find(path, float)

    def get_float(self, path: str) -> float:
        return self._get(path, float, 0.0, "get_float")

    def set_float(self, path: str, value: float) -> bool:
        return self._set(path, float, value, "set_float")

    def find_bool(self, path: str) -> bool:
        return self._find(path, bool)

    def get_bool(self, path: str) -> bool:
        return self._get(path, bool, False, "get_bool")

    def set_bool(self, path: str, value: bool) -> bool:
        return self._set(path, bool, value, "set_bool")


def _home_directory() -> str:
    try:
        import pwd
    except ImportError:
        return os.path.expanduser("~")
    try:
        return pwd.getpwuid(os.getuid()).pw_dir
    except KeyError as exc:
        log(LogType.ERROR, f"config_path: Couldn't find user home: {exc}")
        raise


def config_path(environ: Mapping[str, str] | None = None) -> str:
    """Location of the user's configuration file."""
    env = os.environ if environ is None else environ
    base = env.get("XDG_CONFIG_HOME", "")
    if not base:
        home = env.get("HOME", "") or _home_directory()
        base = home + "/.config"
    return f"{base}/wip/{GAME}.conf"


def load_config(default_text: str, path: str | Path | None = None) -> Config:
    """Read the user's configuration, falling back to ``default_text``."""
    config = Config()
    target = config_path() if path is None else path
    try:
        config.read_file(target)
    except OSError:
        log(LogType.WARN, "load_config: No config file found. Using default.")
        config.read_string(default_text)
    return config