"""Device queries against the sysfs tree."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from sysprobe.util import read_text, to_u32

__all__ = [
    "SYS_ROOT",
    "PciDevice",
    "buses",
    "devices_by_class",
    "device_by_class",
    "guess_bus",
    "pci_devices",
]

SYS_ROOT = "/sys"

Root = str | os.PathLike[str]

_DRIVER_PATH_RE = re.compile(r"/sys/bus/(\w+)/drivers/[\w/]+", re.ASCII)


@dataclass
class PciDevice:
    """A device on the PCI bus."""

    class_id: int = 0
    vendor_id: int = 0
    product_id: int = 0
    bus_info: str = ""
    device_path: Path | None = None
    driver_path: Path | None = None


def _canonical(path: Path) -> Path | None:
    if not path.exists():
        return None
    return path.resolve(strict=True)


def buses(root: Root = SYS_ROOT) -> list[str]:
    """Bus types under <root>/bus, sorted; raises OSError if it cannot be listed."""
    return sorted(os.listdir(Path(root) / "bus"))


def devices_by_class(cls: str, root: Root = SYS_ROOT) -> list[tuple[str, Path | None, Path | None]]:
    """(name, device path, driver path) of each entry in <root>/class/<cls>, sorted by name."""
    directory = Path(root) / "class" / cls
    if not directory.exists():
        return []
    return [
        (entry.name, _canonical(entry / "device"), _canonical(entry / "driver"))
        for entry in sorted(directory.iterdir(), key=lambda item: item.name)
    ]


def device_by_class(cls: str, name: str, root: Root = SYS_ROOT) -> tuple[Path | None, Path | None]:
    """(device path, driver path) of <root>/class/<cls>/<name>."""
    directory = Path(root) / "class" / cls / name
    if not directory.exists():
        return None, None
    device = directory / "device"
    driver = _canonical(device / "driver")
    if driver is None:
        driver = _canonical(device / "device" / "driver")
    return _canonical(device), driver


def guess_bus(path: str) -> str:
    """The bus named by a driver path of the form /sys/bus/<bus>/drivers/..., or ''."""
    match = _DRIVER_PATH_RE.fullmatch(path)
    return match.group(1) if match else ""


def _hex_attribute(path: Path) -> int:
    value = to_u32(read_text(path), 16)
    return 0 if value is None else value


def pci_devices(class_id: int = 0, root: Root = SYS_ROOT) -> list[PciDevice]:
    """PCI devices, all of them or only those of one class, sorted by bus address."""
    directory = Path(root) / "bus" / "pci" / "devices"
    found: list[PciDevice] = []
    for entry in sorted(directory.iterdir(), key=lambda item: item.name):
        device_class = _hex_attribute(entry / "class")
        if class_id and device_class != class_id:
            continue
        found.append(
            PciDevice(
                class_id=device_class,
                vendor_id=_hex_attribute(entry / "vendor"),
                product_id=_hex_attribute(entry / "device"),
                bus_info=entry.name,
                device_path=entry.resolve(),
                driver_path=_canonical(entry / "driver"),
            )
        )
    return found