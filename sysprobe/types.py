"""Core value types: versions, vendors and bus types."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    "Version",
    "VERSION_PATTERN",
    "to_version",
    "strict_equal",
    "Vendor",
    "BusType",
    "bus_cast",
    "bus_name",
]

# major.minor.patch.build-codename or major.minor.patch-build-codename
VERSION_PATTERN = (
    r"(?:[^\.]*[^\d\.]{1})*(\d+)\.(\d+)(?:\.(\d+))?"
    r"(?:[\.-]{1}(\d+))?(?:\-{1}(\w+))?(?:[^\d\.]{1}[^\.]*)*"
)

_VERSION_RE = re.compile(VERSION_PATTERN, re.ASCII)
_NUMBER_RE = re.compile(r"\d+", re.ASCII)
_U32 = 0xFFFFFFFF


@dataclass(frozen=True, eq=False)
class Version:
    """A version number; equality and ordering ignore the codename."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    build: int = 0
    codename: str = ""

    def _key(self) -> tuple[int, int, int, int]:
        return (self.major, self.minor, self.patch, self.build)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() >= other._key()

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.build:
            text += f"-{self.build}"
        if self.codename:
            text += f" ({self.codename})"
        return text


def _u32(group: str | None) -> int:
    return int(group) & _U32 if group else 0


def to_version(text: str) -> Version:
    """Parse a version out of a string; an all-zero version if none is found."""
    if _NUMBER_RE.fullmatch(text):
        return Version(int(text) & _U32)

    match = _VERSION_RE.fullmatch(text)
    if match is None:
        return Version()

    major, minor, patch, build, codename = match.groups()
    return Version(_u32(major), _u32(minor), _u32(patch), _u32(build), codename or "")


def strict_equal(left: Version, right: Version) -> bool:
    """Compare two versions including their codenames."""
    return left == right and left.codename == right.codename


class Vendor(IntEnum):
    """Commonly used PCI vendor identifiers."""

    Unknown = 0x0000
    NVIDIA = 0x10DE
    Intel = 0x8086
    Microsoft = 0x1414
    Qualcomm = 0x17CB
    AMD = 0x1002
    Apple = 0x106B


class BusType(IntEnum):
    """Bus or protocol a device is attached through."""

    Unknown = 0x00
    SCSI = 1
    ATAPI = 2
    ATA = 3
    IEEE1394 = 4
    SSA = 5
    Fibre = 6
    USB = 7
    RAID = 8
    iSCSI = 9
    SAS = 10
    SATA = 11
    SDIO = 12
    MMC = 13
    Virtual = 14
    FileBackedVirtual = 15
    Spaces = 16
    NVMe = 17
    SCM = 18
    UFS = 19
    MAX = 20
    AC97 = 21
    ACPI = 22
    Auxiliary = 23
    CPU = 24
    GPIO = 25
    HDAudio = 26
    HID = 27
    I2C = 28
    ISA = 29
    PCI = 30
    PCIe = 31
    SPI = 32
    CAN = 33
    EISA = 34
    MDIO = 35
    IDE = 36
    Virtio = 37
    NVMEM = 38
    PnP = 39
    VME = 40
    Xen = 41
    CEC = 42
    MaxReserved = 0x7F

    def __str__(self) -> str:
        return bus_name(self)


_BUS_PATTERNS: list[tuple[re.Pattern[str], BusType]] = [
    (re.compile(pattern, re.IGNORECASE | re.ASCII), bus)
    for pattern, bus in (
        (r"\bAC97\b", BusType.AC97),
        (r"\bACPI\b|Advanced[ _-]Configuration[ _-]and[ _-]Power[ _-]Interface", BusType.ACPI),
        (r"\bAuxiliary\b", BusType.Auxiliary),
        (r"\bATA\b|Advanced[ _-]?Technology[ _-]?Attachment", BusType.ATA),
        (r"\bCAN\b|Controller[ _-]?Area[ _-]?Network", BusType.CAN),
        (r"\bCEC\b|Consumer[ _-]?Electronics[ _-]?Control", BusType.CEC),
        (r"\bCPU\b", BusType.CPU),
        (
            r"\bEISA\b|Extended[ _-]?ISA|Extended[ _-]?Industry[ _-]?Standard[ _-]?Architecture",
            BusType.EISA,
        ),
        (r"\bFibre\b", BusType.Fibre),
        (r"File[ _-]?Backed[ _-]?Virtual", BusType.FileBackedVirtual),
        (r"\bGPIO\b|General[ _-]?Purpose[ _-]?Input/Output", BusType.GPIO),
        (r"HD[ _-]?Audio", BusType.HDAudio),
        (r"\bID\b|Human[ _-]?Interface[ _-]?Device", BusType.HID),
        (r"IEEE[ _-]?1394", BusType.IEEE1394),
        (r"\bI2C\b|IIC|Inter[ _-]?Integrated[ _-]?Circuit", BusType.I2C),
        (r"\bIDE\b", BusType.IDE),
        (r"\bISA\b|Industry[ _-]?Standard[ _-]?Architecture", BusType.ISA),
        (
            r"\biSCSI\b|Internet[ _-]?Small[ _-]?Computer[ _-]?Systems[ _-]?Interface",
            BusType.iSCSI,
        ),
        (r"\bMAX\b", BusType.MAX),
        (r"\bMDIO\b|Management[ _-]?Data[ _-]?Input/Output", BusType.MDIO),
        (r"\bSMI\b|Serial[ _-]?Management[ _-]?Interface", BusType.MDIO),
        (r"\bMIIM\b|Media[ _-]?Independent[ _-]?Interface Management", BusType.MDIO),
        (r"\bMMC\b|Multi[ _-]Media[ _-]Card", BusType.MMC),
        (r"\bNVMEM\b", BusType.NVMEM),
        (r"\bNVMe\b|NVMHCIS|NVM[ _-]?Express", BusType.NVMe),
        (r"\bPCI\b|Peripheral[ _-]?Component[ _-]?Interconnect", BusType.PCI),
        (
            r"\bPCI\b[ _-]?e|PCI[ _-]?Express"
            r"|Peripheral[ _-]?Component[ _-]?Interconnect[ _-]?Express",
            BusType.PCIe,
        ),
        (r"\bPnP\b|Plug[ _-]?and[ _-]?Play", BusType.PnP),
        (r"\bRAID\b", BusType.RAID),
        (r"\bSAS\b|Serial[ _-]?Attached[ _-]?SCSI", BusType.SAS),
        (r"\bSATA\b|Serial[ _-]?ATA|Serial[ _-]?AT[ _-]?Attachment", BusType.SATA),
        (r"\bSCM\b", BusType.SCM),
        (r"\bSCSI\b", BusType.SCSI),
        (r"\bSDIO\b|\bSD\b", BusType.SDIO),
        (r"\bSpaces\b", BusType.Spaces),
        (r"\bSPI\b|Serial[ _-]Peripheral[ _-]Interface", BusType.SPI),
        (r"\bSSA\b|Serial[ _-]Storage[ _-]Architecture", BusType.SSA),
        (r"\bUFS\b|Universal[ _-]Flash[ _-]Storage", BusType.UFS),
        (r"\bUSB\b|Universal[ _-]Serial[ _-]Bus", BusType.USB),
        (r"\bVirtio\b", BusType.Virtio),
        (r"\bVirtual\b", BusType.Virtual),
        (r"\bVME\b|Versa[ _-]Module[ _-]Eurocard", BusType.VME),
        (r"\bXen\b", BusType.Xen),
    )
]

_BUS_NAMES: dict[BusType, str] = {
    bus: bus.name for bus in BusType if bus not in (BusType.Unknown, BusType.MaxReserved)
}
_BUS_NAMES[BusType.IEEE1394] = "1394"


def bus_cast(text: str) -> BusType:
    """Guess the bus type named somewhere in a description string."""
    for pattern, bus in _BUS_PATTERNS:
        if pattern.search(text):
            return bus
    return BusType.Unknown


def bus_name(bus: BusType) -> str:
    """The display name of a bus type."""
    return _BUS_NAMES.get(bus, "Unknown")


# Windows releases, stable versions.
WIN_3_1 = Version(3, 10, 102, 0, "Sparta")
WIN_95 = Version(4, 0, 950, 0, "Chicago")
WIN_98 = Version(4, 10, 1998, 0, "Memphis")
WIN_2000 = Version(5, 0, 2195, 0, "Janus")
WIN_XP = Version(5, 2, 2600, 0, "Whistler")
WIN_VISTA = Version(6, 0, 6000, 0, "Longhorn")
WIN_7 = Version(6, 1, 7600, 0, "7")
WIN_8_0 = Version(6, 2, 9200, 0, "8")
WIN_8_1 = Version(6, 3, 9600, 0, "Blue")
WIN_10_1507 = Version(10, 0, 10240, 16405, "1507")
WIN_10_1511 = Version(10, 0, 10586, 3, "1511")
WIN_10_1607 = Version(10, 0, 14393, 10, "1607")
WIN_10_1703 = Version(10, 0, 15063, 138, "1703")
WIN_10_1709 = Version(10, 0, 16299, 19, "1709")
WIN_10_1803 = Version(10, 0, 17134, 48, "1803")
WIN_10_1809 = Version(10, 0, 17763, 1, "1809")
WIN_10_1903 = Version(10, 0, 18362, 116, "1903")
WIN_10_1909 = Version(10, 0, 18363, 476, "1909")
WIN_10_2004 = Version(10, 0, 19041, 264, "2004")
WIN_10_20H2 = Version(10, 0, 19042, 572, "20H2")
WIN_10_21H1 = Version(10, 0, 19043, 985, "21H1")
WIN_10_21H2 = Version(10, 0, 19044, 288, "21H2")
WIN_10_22H2 = Version(10, 0, 19045, 2130, "22H2")
WIN_10 = WIN_10_1507
WIN_11_21H2 = Version(10, 0, 22000, 194, "21H2")
WIN_11_22H2 = Version(10, 0, 22621, 382, "22H2")
WIN_11_23H2 = Version(10, 0, 22631, 2428, "23H2")
WIN_11_24H2 = Version(10, 0, 26100, 863, "24H2")
WIN_11 = WIN_11_21H2