import pytest

from sysprobe import sysfs


@pytest.fixture
def sys_root(tmp_path):
    root = tmp_path / "sys"
    (root / "bus" / "pci" / "devices").mkdir(parents=True)
    (root / "bus" / "usb").mkdir()
    driver = root / "bus" / "pci" / "drivers" / "e1000e"
    driver.mkdir(parents=True)

    real = root / "devices" / "pci0000:00" / "0000:00:1f.6"
    real.mkdir(parents=True)
    (real / "vendor").write_text("0x8086\n")
    (real / "device").write_text("0x15bc\n")
    (real / "class").write_text("0x020000\n")
    (real / "driver").symlink_to(driver)
    (root / "bus" / "pci" / "devices" / "0000:00:1f.6").symlink_to(real)

    bare = root / "devices" / "pci0000:00" / "0000:00:00.0"
    bare.mkdir()
    (bare / "class").write_text("0x060000\n")
    (root / "bus" / "pci" / "devices" / "0000:00:00.0").symlink_to(bare)

    net = root / "class" / "net"
    net.mkdir(parents=True)
    (net / "eth0").mkdir()
    (net / "eth0" / "device").symlink_to(real)
    (net / "lo").mkdir()
    return root


def test_buses(sys_root):
    assert sysfs.buses(sys_root) == ["pci", "usb"]


def test_buses_missing_root_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        sysfs.buses(tmp_path / "nothing")


def test_pci_devices_all(sys_root):
    devices = sysfs.pci_devices(0, sys_root)
    assert [d.bus_info for d in devices] == ["0000:00:00.0", "0000:00:1f.6"]
    nic = devices[1]
    assert nic.vendor_id == 0x8086
    assert nic.product_id == 0x15BC
    assert nic.class_id == 0x020000
    assert nic.device_path == (sys_root / "devices" / "pci0000:00" / "0000:00:1f.6").resolve()
    assert nic.driver_path == (sys_root / "bus" / "pci" / "drivers" / "e1000e").resolve()


def test_pci_devices_missing_attributes(sys_root):
    bare = sysfs.pci_devices(0, sys_root)[0]
    assert bare.vendor_id == 0
    assert bare.product_id == 0
    assert bare.driver_path is None


def test_pci_devices_class_filter(sys_root):
    assert [d.bus_info for d in sysfs.pci_devices(0x020000, sys_root)] == ["0000:00:1f.6"]
    assert sysfs.pci_devices(0x030000, sys_root) == []


def test_devices_by_class(sys_root):
    entries = sysfs.devices_by_class("net", sys_root)
    assert [name for name, _, _ in entries] == ["eth0", "lo"]
    eth0 = entries[0]
    assert eth0[1] == (sys_root / "devices" / "pci0000:00" / "0000:00:1f.6").resolve()
    assert eth0[2] is None
    assert entries[1][1:] == (None, None)


def test_devices_by_missing_class(sys_root):
    assert sysfs.devices_by_class("sound", sys_root) == []


def test_device_by_class_follows_device_driver(sys_root):
    device, driver = sysfs.device_by_class("net", "eth0", sys_root)
    assert device == (sys_root / "devices" / "pci0000:00" / "0000:00:1f.6").resolve()
    assert driver == (sys_root / "bus" / "pci" / "drivers" / "e1000e").resolve()


def test_device_by_class_missing(sys_root):
    assert sysfs.device_by_class("net", "wlan9", sys_root) == (None, None)
    assert sysfs.device_by_class("net", "lo", sys_root) == (None, None)


@pytest.mark.parametrize(
    "path, bus",
    [
        ("/sys/bus/pci/drivers/e1000e", "pci"),
        ("/sys/bus/usb/drivers/usb/sub", "usb"),
        ("/sys/bus/usb/drivers/usb-storage", ""),
        ("/sys/devices/pci0000:00", ""),
        ("", ""),
    ],
)
def test_guess_bus(path, bus):
    assert sysfs.guess_bus(path) == bus