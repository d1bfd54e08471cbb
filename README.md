# sysprobe

Helpers for reading information about a Linux machine from the places it
already exposes it: the per-process files under `/proc`, the device tree
under `/sys`, USB serial devices under `/dev`, and the `gsettings` command.
It also parses free-form version strings, guesses bus types from device
descriptions, decodes raw SMBIOS tables, and turns a `pci.ids` database
into a C header of vendor and device names.

No third-party packages are needed.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module               | What it does                                                              |
|----------------------|---------------------------------------------------------------------------|
| `sysprobe.types`     | `Version` parsing and comparison, `Vendor` ids, `BusType` guessing/naming |
| `sysprobe.util`      | string, number and file helpers; run commands and read their output      |
| `sysprobe.gsettings` | list GNOME `gsettings` schemas and keys, check whether they exist         |
| `sysprobe.pciids`    | parse a `pci.ids` file and render a header of vendors and devices         |
| `sysprobe.clock`     | wall-clock and monotonic time in nanoseconds, an interval `Timer`         |
| `sysprobe.procfs`    | parse `/proc/<pid>/stat`, `statm`, `status`, `io`, `cmdline`, `comm`, ... |
| `sysprobe.sysfs`     | buses, devices by class and PCI devices under `/sys`                      |
| `sysprobe.serial`    | USB serial ports (`ttyUSB*`) under `/dev`                                 |
| `sysprobe.smbios`    | split SMBIOS tables into structures, decode memory arrays and devices     |

## Examples

### Versions

Versions are parsed from free-form strings and compared numerically on
major, minor, patch and build; `==` ignores the codename, `strict_equal`
checks it too. A string with no version in it gives `0.0.0`.

```python
from sysprobe.types import to_version, strict_equal

kernel = to_version("5.15.0-91-generic")
print(kernel)                                         # 5.15.0-91 (generic)
print(kernel >= to_version("5.10"))                   # True
print(strict_equal(kernel, to_version("5.15.0-91")))  # False
```

### Bus types

```python
from sysprobe.types import BusType, bus_cast, bus_name

print(bus_cast("USB Mass Storage Device") is BusType.USB)  # True
print(bus_name(BusType.IEEE1394))                          # 1394
print(str(BusType.NVMe))                                   # NVMe
```

### Process files

Every reader takes a pid (an integer or a string such as `"self"`) and an
optional `proc_root`, so it can be pointed at a copy of `/proc`.

```python
import os
from sysprobe import procfs

pid = os.getpid()
stat = procfs.parse_stat(pid)
print(stat.comm, stat.state, stat.nb_threads)

status = procfs.parse_status(pid)
print(status.name, status.state, status.vm_rss, status.ruid)

print(procfs.parse_comm(pid))
print(procfs.parse_cmdline(pid).split("\0"))
print(procfs.uptime())          # boot time, ns since the epoch; 0 if unknown
```

`parse_status` raises `ValueError` if a numeric field is malformed; the other
readers leave unreadable fields at zero.

### Devices

```python
from sysprobe import serial, sysfs

print(sysfs.buses())
for name, device, driver in sysfs.devices_by_class("net"):
    print(name, device, driver)

for dev in sysfs.pci_devices():
    print(dev.bus_info, hex(dev.vendor_id), hex(dev.product_id), dev.driver_path)

print(sysfs.guess_bus("/sys/bus/pci/drivers/e1000e"))   # pci

for port in serial.ports():
    print(port.name, port.device)
```

The sysfs functions take an optional `root` (default `/sys`), and
`serial.ports` an optional `dev_root` (default `/dev`).

### Commands

```python
from sysprobe import gsettings
from sysprobe.util import PipeListener, exec_sync

print(exec_sync(["uname", "-r"]))
print(gsettings.contains_schema("org.gnome.desktop.interface"))

with PipeListener() as listener:
    listener.listen(["dmesg", "--follow"], print)
    ...
```

### Timer

```python
from sysprobe.clock import Timer

timer = Timer(1.0, lambda: print("tick"))   # repeats until stopped
...
timer.stop()

Timer(0.5, lambda: print("once"), single=True)
```

### SMBIOS

`parse_table` splits raw table data into structures; `parse_raw` takes a
firmware table blob with its 8-byte header (calling method, major, minor,
DMI revision, length) in front.

```python
from sysprobe.smbios import MemoryDevice, SmbiosType, parse_raw, type_name

smbios = parse_raw(raw_blob)
print(smbios.version)
for item in smbios.table:
    print(type_name(item.type), item.strings)
    if item.type == SmbiosType.MemoryDevice:
        device = MemoryDevice.from_bytes(item.fields)
        print(device.size, device.speed)
```

## Generating a PCI ID header

The `sysprobe-pciids` command reads a `pci.ids` database, prints the
vendors and devices it found, and writes `pciids.h` in the current
directory:

```
sysprobe-pciids path/to/pci.ids
```

Without an argument it reads `../pciids/pci.ids`. Malformed lines are
reported on standard error. It exits with a non-zero status if the database
cannot be opened or the header cannot be written. The same parsing is
available as `sysprobe.pciids.parse_pciids` and `render_header`.

## What it does not do

- It does not list running processes or look up a process's user,
  executable path or memory use for you; it only parses the individual
  `/proc/<pid>` files.
- It does not report the distribution name or version, the kernel, the
  hostname, the desktop environment, the theme or the windowing system.
- It does not read SMBIOS data from the firmware; you supply the bytes.