import pytest

from sysprobe.pciids import PciIds, main, parse_pciids, render_header

SAMPLE = [
    "# comment line that is ignored\n",
    "8086  Intel Corporation\n",
    '\t1234  Some "quoted" Device\n',
    "\t\t8086 0001  Sub\n",
    "10de  NVIDIA Corporation\n",
    "\t1e04  TU102\n",
    "abc  Broken\n",
    "\t5678  Orphan device\n",
    "C 00  Unclassified device\n",
    "\t00  Non-VGA unclassified\n",
    "zzzz  not a vendor line\n",
]


@pytest.fixture
def ids():
    return parse_pciids(SAMPLE)


def test_vendors(ids):
    assert ids.vendors == {"8086": "Intel Corporation", "10de": "NVIDIA Corporation"}


def test_devices(ids):
    assert ids.devices == {
        "80861234": 'Some "quoted" Device',
        "10de1e04": "TU102",
    }


def test_errors_and_orphans(ids):
    assert ids.errors == ["abc  Broken"]
    assert not any(key.endswith("5678") for key in ids.devices)


def test_class_section_then_vendor():
    parsed = parse_pciids(["C 02  Network controller", "\t00  Ethernet", "1af4  Red Hat, Inc."])
    assert parsed.vendors == {"1af4": "Red Hat, Inc."}
    assert parsed.devices == {}


def test_render_header(ids):
    text = render_header(ids)
    assert text.startswith("#ifndef PROBE_PCIIDS_H\n#define PROBE_PCIIDS_H\n")
    assert text.endswith("#endif //! PROBE_PCIIDS_H\n")
    assert 'V(0x10de,"NVIDIA Corporation")\\\n' in text
    assert 'P(0x80861234,"Some \\"quoted\\" Device")\\\n' in text
    assert text.index("V(0x10de") < text.index("V(0x8086")
    assert "#define PCIIDS_SUBSYSTEMS \\\n" in text


def test_render_empty():
    text = render_header(PciIds())
    assert "V(" not in text
    assert "P(" not in text


def test_main_writes_header(tmp_path, monkeypatch, capsys):
    source = tmp_path / "pci.ids"
    source.write_text("".join(SAMPLE))
    monkeypatch.chdir(tmp_path)
    assert main([str(source)]) == 0
    assert (tmp_path / "pciids.h").read_text() == render_header(parse_pciids(SAMPLE))
    captured = capsys.readouterr()
    assert "8086: Intel Corporation\n" in captured.out
    assert "\t1e04: TU102\n" in captured.out
    assert "error at : abc  Broken" in captured.err


def test_main_missing_file(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    missing = tmp_path / "missing.ids"
    assert main([str(missing)]) == 1
    assert str(missing) in capsys.readouterr().err
    assert not (tmp_path / "pciids.h").exists()