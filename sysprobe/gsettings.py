"""Queries against the GNOME gsettings command."""

from __future__ import annotations

from contextlib import closing

from sysprobe.types import Version, to_version
from sysprobe.util import exec_lines, exec_sync

__all__ = ["version", "list_schemas", "list_keys", "contains_schema", "contains_key"]


def version() -> Version:
    """The gsettings version, or an all-zero version if it is not available."""
    lines = exec_sync(["gsettings", "--version"])
    if not lines:
        return Version()
    return to_version(lines[0])


def list_schemas() -> list[str]:
    """Installed schemas."""
    return exec_sync(["gsettings", "list-schemas"])


def list_keys(schema: str) -> list[str]:
    """Keys of a schema."""
    return exec_sync(["gsettings", "list-keys", schema])


def contains_schema(schema: str) -> bool:
    """Whether a schema is installed."""
    with closing(exec_lines(["gsettings", "list-schemas"])) as lines:
        return any(line == schema for line in lines)


def contains_key(schema: str, key: str) -> bool:
    """Whether a schema holds a key."""
    with closing(exec_lines(["gsettings", "list-keys", schema])) as lines:
        return any(line == key for line in lines)