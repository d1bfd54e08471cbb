import os

import pytest

from sysprobe import serial


def test_ports_lists_usb_serial_devices(tmp_path):
    for name in ("ttyUSB1", "ttyUSB0", "ttyS0", "ttyACM0", "null"):
        (tmp_path / name).write_text("")
    (tmp_path / "ttyUSBdir").mkdir()

    found = serial.ports(tmp_path)

    assert [p.name for p in found] == ["ttyUSB0", "ttyUSB1"]
    assert found[0].device == os.path.join(str(tmp_path), "ttyUSB0")
    assert found[0].driver == ""


def test_ports_empty_directory(tmp_path):
    assert serial.ports(tmp_path) == []


def test_ports_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        serial.ports(tmp_path / "missing")