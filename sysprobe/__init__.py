"""Read procfs, sysfs and device information; parse versions, SMBIOS tables and pci.ids."""

__version__ = "0.1.0"

__all__ = [
    "clock",
    "gsettings",
    "pciids",
    "procfs",
    "serial",
    "smbios",
    "sysfs",
    "types",
    "util",
]