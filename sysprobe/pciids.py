"""Parse the pci.ids database and generate the vendor/device header from it."""

from __future__ import annotations

import argparse
import re
import sys
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum

__all__ = ["PciIds", "parse_pciids", "render_header", "main"]

_VENDOR_RE = re.compile(r"([\d\w]{4})[ |\t]+(.*)", re.ASCII)
_DEVICE_RE = re.compile(r"\t([\d\w]{4})[ |\t]+(.*)", re.ASCII)
_VALID_FIRST = frozenset("0123456789abcdef\tC")

DEFAULT_PATH = "../pciids/pci.ids"
HEADER_NAME = "pciids.h"


@dataclass
class PciIds:
    """Vendors keyed by id, devices keyed by vendor id + device id, and malformed lines."""

    vendors: dict[str, str] = field(default_factory=dict)
    devices: dict[str, str] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


class _Section(IntEnum):
    VENDOR = 0x10
    CLASS = 0x20


def _is_valid(line: str) -> bool:
    return len(line) >= 6 and line[0] in _VALID_FIRST


def _level(line: str) -> int:
    if line[0] != "\t":
        return 0
    return 2 if line[1] == "\t" else 1


def parse_pciids(lines: Iterable[str]) -> PciIds:
    """Parse pci.ids lines into vendor and device tables."""
    ids = PciIds()
    section = _Section.VENDOR
    vendor_id = ""

    for raw in lines:
        line = raw[:-1] if raw.endswith("\n") else raw
        if not _is_valid(line):
            continue

        if line[0] == "C":
            section = _Section.CLASS
        elif line[0] != "\t":
            section = _Section.VENDOR

        if section is _Section.CLASS:
            continue

        level = _level(line)
        if level == 0:
            match = _VENDOR_RE.fullmatch(line)
            if match is None:
                vendor_id = ""
                ids.errors.append(line)
                continue
            vendor_id = match.group(1)
            ids.vendors[vendor_id] = match.group(2)
        elif level == 1:
            if not vendor_id:
                continue
            match = _DEVICE_RE.fullmatch(line)
            if match is None:
                ids.errors.append(line)
                continue
            ids.devices[vendor_id + match.group(1)] = match.group(2)
        # Subsystem lines (level 2) are not collected.

    return ids


def _quoted(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def render_header(ids: PciIds) -> str:
    """Render the vendor and device tables as a C header of X-macros."""
    parts = [
        "#ifndef PROBE_PCIIDS_H\n",
        "#define PROBE_PCIIDS_H\n",
        "\n",
        "// Don't modify this file, which was generated by tools/pciids.\n",
        "\n",
        "// clang-format off\n",
        "#define PCIIDS_VENDORS \\\n",
    ]
    parts.extend(f"V(0x{key},{_quoted(value)})\\\n" for key, value in sorted(ids.vendors.items()))
    parts.append("\n")
    parts.append("#define PCIIDS_DEVICES \\\n")
    parts.extend(f"P(0x{key},{_quoted(value)})\\\n" for key, value in sorted(ids.devices.items()))
    parts.append("\n")
    parts.append("#define PCIIDS_SUBSYSTEMS \\\n")
    parts.append("// clang-format on\n\n")
    parts.append("#endif //! PROBE_PCIIDS_H\n")
    return "".join(parts)


def _print_listing(ids: PciIds) -> None:
    by_vendor: dict[str, list[tuple[str, str]]] = defaultdict(list)
    for key, name in ids.devices.items():
        by_vendor[key[:4]].append((key[4:], name))
    for vendor_id, vendor_name in ids.vendors.items():
        print(f"{vendor_id}: {vendor_name}")
        for device_id, device_name in by_vendor.get(vendor_id, ()):
            print(f"\t{device_id}: {device_name}")


def main(argv: list[str] | None = None) -> int:
    """Read a pci.ids file and write pciids.h into the current directory."""
    parser = argparse.ArgumentParser(description="Generate pciids.h from a pci.ids file.")
    parser.add_argument("path", nargs="?", default=DEFAULT_PATH, help="path of the pci.ids file")
    options = parser.parse_args(argv)

    try:
        with open(options.path, encoding="utf-8", errors="replace") as handle:
            ids = parse_pciids(handle)
    except OSError:
        print(f"cannot open the pciids file: {options.path}.", file=sys.stderr)
        return 1

    for line in ids.errors:
        print(f"error at : {line}", file=sys.stderr)
    _print_listing(ids)

    try:
        with open(HEADER_NAME, "w", encoding="utf-8") as header:
            header.write(render_header(ids))
    except OSError:
        print("failed to generate the header file.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())