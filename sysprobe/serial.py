"""Serial ports found in the device directory."""

from __future__ import annotations

import os
from dataclasses import dataclass

__all__ = ["DEV_ROOT", "SerialPort", "ports"]

DEV_ROOT = "/dev"

_PREFIX = "ttyUSB"


@dataclass
class SerialPort:
    """A serial port device."""

    name: str = ""
    friendly_name: str = ""
    device: str = ""
    instance_id: str = ""
    description: str = ""
    manufacturer: str = ""
    driver: str = ""


def ports(dev_root: str | os.PathLike[str] = DEV_ROOT) -> list[SerialPort]:
    """USB serial ports (ttyUSB*) under the device directory, sorted by name."""
    with os.scandir(dev_root) as entries:
        found = [
            SerialPort(name=entry.name, device=entry.path)
            for entry in entries
            if entry.name.startswith(_PREFIX) and not entry.is_dir()
        ]
    found.sort(key=lambda port: port.name)
    return found