"""String, file, number and child-process helpers."""

from __future__ import annotations

import itertools
import os
import re
import subprocess
import threading
from collections.abc import Callable, Iterable, Iterator
from typing import Any, TypeVar

__all__ = [
    "WHITESPACE",
    "trim",
    "kb",
    "mb",
    "gb",
    "read_text",
    "read_lines",
    "to_i32",
    "to_u32",
    "to_i64",
    "to_u64",
    "to_bool",
    "env",
    "unique",
    "exec_lines",
    "exec_sync",
    "PipeListener",
]

WHITESPACE = " \f\n\r\t\v"

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_HEX_DIGITS = _DIGITS[:16]
_LONG_MIN = -(1 << 63)
_LONG_MAX = (1 << 63) - 1
_ULONG_MAX = (1 << 64) - 1
_BOOL_RE = re.compile(r"1|on|true", re.IGNORECASE)

T = TypeVar("T")


def trim(text: str) -> str:
    """Strip leading and trailing whitespace."""
    return text.strip(WHITESPACE)


def kb(value: int) -> float:
    """Bytes to kibibytes."""
    return value / 1024


def mb(value: int) -> float:
    """Bytes to mebibytes."""
    return value / (1024 * 1024)


def gb(value: int) -> float:
    """Bytes to gibibytes."""
    return value / (1024 * 1024 * 1024)


def read_text(path: str | os.PathLike[str]) -> str:
    """Read a whole file; an empty string if it cannot be read."""
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            return handle.read()
    except OSError:
        return ""


def read_lines(path: str | os.PathLike[str]) -> Iterator[str]:
    """Yield the lines of a file without their newlines; nothing if it cannot be read."""
    try:
        handle = open(path, encoding="utf-8", errors="replace", newline="")
    except OSError:
        return
    with handle:
        for line in handle:
            yield line[:-1] if line.endswith("\n") else line


def _parse_integer(text: str, base: int) -> int | None:
    """Parse the longest integer prefix of text, C-library style."""
    if base != 0 and not 2 <= base <= 36:
        return None

    rest = text.lstrip(WHITESPACE)
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]

    has_hex_prefix = rest[:2].lower() == "0x" and rest[2:3].lower() in tuple(_HEX_DIGITS)
    if base in (0, 16) and has_hex_prefix:
        rest = rest[2:]
        base = 16
    elif base == 0:
        base = 8 if rest.startswith("0") else 10

    valid = _DIGITS[:base]
    digits = "".join(itertools.takewhile(lambda ch: ch.lower() in valid, rest))
    if not digits:
        return None
    value = int(digits, base)
    return -value if negative else value


def _to_long(text: str, base: int) -> int | None:
    value = _parse_integer(text, base)
    if value is None or not _LONG_MIN <= value <= _LONG_MAX:
        return None
    return value


def _to_ulong(text: str, base: int) -> int | None:
    value = _parse_integer(text, base)
    if value is None or abs(value) > _ULONG_MAX:
        return None
    return value & _ULONG_MAX


def _wrap_signed(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def to_i32(text: str, base: int = 10) -> int | None:
    """Parse a signed integer, truncated to 32 bits; None if there is none."""
    value = _to_long(text, base)
    return None if value is None else _wrap_signed(value, 32)


def to_u32(text: str, base: int = 10) -> int | None:
    """Parse an unsigned integer, truncated to 32 bits; None if there is none."""
    value = _to_ulong(text, base)
    return None if value is None else value & 0xFFFFFFFF


def to_i64(text: str, base: int = 10) -> int | None:
    """Parse a signed 64-bit integer; None if there is none or it is out of range."""
    return _to_long(text, base)


def to_u64(text: str, base: int = 10) -> int | None:
    """Parse an unsigned 64-bit integer; None if there is none or it is out of range."""
    return _to_ulong(text, base)


def to_bool(text: str) -> bool:
    """True for '1', 'on' or 'true' in any case, False otherwise."""
    return _BOOL_RE.fullmatch(text) is not None


def env(name: str) -> str:
    """The value of an environment variable, or an empty string."""
    return os.environ.get(name, "")


def unique(items: Iterable[T]) -> list[T]:
    """Sorted items with duplicates removed."""
    return [key for key, _ in itertools.groupby(sorted(items))]  # type: ignore[type-var]


def _spawn(args: list[str]) -> subprocess.Popen[str]:
    return subprocess.Popen(
        args,
        stdout=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
    )


def _reap(process: subprocess.Popen[Any]) -> None:
    if process.stdout is not None:
        process.stdout.close()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        process.kill()
        process.wait()


def _close(process: subprocess.Popen[Any]) -> None:
    if process.poll() is None:
        process.terminate()
    _reap(process)


def exec_lines(args: Iterable[str]) -> Iterator[str]:
    """Run a command and yield its output lines; the command is terminated when the caller stops."""
    try:
        process = _spawn(list(args))
    except (OSError, ValueError):
        return
    try:
        assert process.stdout is not None
        for line in process.stdout:
            yield line[:-1] if line.endswith("\n") else line
    finally:
        _close(process)


def exec_sync(args: Iterable[str]) -> list[str]:
    """Run a command and return all of its output lines."""
    return list(exec_lines(args))


class PipeListener:
    """Run a command in the background and pass each output line to a callback."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._running = False
        self._process: subprocess.Popen[str] | None = None
        self._thread: threading.Thread | None = None

    def listen(self, command: Iterable[str], callback: Callable[[str], Any]) -> None:
        """Start the command; raises OSError if it cannot be started."""
        args = list(command)
        if not args:
            raise ValueError("empty command")
        if self.running():
            raise RuntimeError("already listening")
        self.stop()

        process = _spawn(args)
        thread = threading.Thread(
            target=self._pump,
            args=(process, callback),
            name=f"listen-{args[0]}",
            daemon=True,
        )
        with self._lock:
            self._process = process
            self._thread = thread
            self._running = True
        thread.start()

    def _pump(self, process: subprocess.Popen[str], callback: Callable[[str], Any]) -> None:
        assert process.stdout is not None
        try:
            while self._running:
                line = process.stdout.readline()
                if not line:
                    break
                callback(line)
        finally:
            self._running = False

    def stop(self) -> None:
        """Terminate the command and wait for the reading thread."""
        with self._lock:
            self._running = False
            process, self._process = self._process, None
            thread, self._thread = self._thread, None
        if process is None:
            return
        if process.poll() is None:
            process.terminate()
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        _reap(process)

    def running(self) -> bool:
        """Whether the command is still being read."""
        return self._running

    def __enter__(self) -> PipeListener:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()