from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from typing import IO, Any, Optional

JSON_ENV = "GOG_JSON"
PLAIN_ENV = "GOG_PLAIN"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class OutputMode:
    as_json: bool = False
    plain: bool = False

    @property
    def is_json(self) -> bool:
        return self.as_json

    @property
    def is_plain(self) -> bool:
        return self.plain

    @classmethod
    def from_flags(cls, json_flag: bool = False, plain_flag: bool = False) -> OutputMode:
        return cls(as_json=json_flag or _env_flag(JSON_ENV), plain=plain_flag or _env_flag(PLAIN_ENV))


class Printer:
    """Line-oriented writer for one output stream."""

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream

    def printf(self, fmt: str, *args: Any) -> None:
        self.println(fmt % args if args else fmt)

    def println(self, msg: str = "") -> None:
        self._stream.write(f"{msg}\n")
        self._stream.flush()


class UI:
    def __init__(self, stdout: Optional[IO[str]] = None, stderr: Optional[IO[str]] = None) -> None:
        self._out = Printer(stdout if stdout is not None else sys.stdout)
        self._err = Printer(stderr if stderr is not None else sys.stderr)

    def out(self) -> Printer:
        return self._out

    def err(self) -> Printer:
        return self._err


@dataclass
class CommandContext:
    """What a subcommand needs besides its arguments. ``ui`` is None when text output is unwanted."""

    mode: OutputMode
    ui: Optional[UI] = None


def write_json(stream: IO[str], obj: Any) -> None:
    stream.write(json.dumps(obj, indent=2) + "\n")
    stream.flush()
