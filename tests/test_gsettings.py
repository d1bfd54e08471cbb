import pytest

from sysprobe import gsettings
from sysprobe.types import Version

FAKE_GSETTINGS = """#!/bin/sh
case "$1" in
  --version) echo "2.72.4" ;;
  list-schemas) printf 'org.gnome.desktop.interface\\norg.example.demo\\n' ;;
  list-keys)
    if [ "$2" = "org.example.demo" ]; then
      printf 'color-scheme\\nfont-name\\n'
    fi
    ;;
esac
"""


@pytest.fixture
def fake_gsettings(tmp_path, monkeypatch):
    script = tmp_path / "gsettings"
    script.write_text(FAKE_GSETTINGS)
    script.chmod(0o755)
    monkeypatch.setenv("PATH", str(tmp_path))
    return script


@pytest.fixture
def no_gsettings(tmp_path, monkeypatch):
    empty = tmp_path / "empty"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))


def test_version(fake_gsettings):
    assert gsettings.version() == Version(2, 72, 4)


def test_list_schemas(fake_gsettings):
    assert gsettings.list_schemas() == ["org.gnome.desktop.interface", "org.example.demo"]


def test_list_keys(fake_gsettings):
    assert gsettings.list_keys("org.example.demo") == ["color-scheme", "font-name"]
    assert gsettings.list_keys("org.example.other") == []


def test_contains_schema(fake_gsettings):
    assert gsettings.contains_schema("org.example.demo") is True
    assert gsettings.contains_schema("org.example") is False


def test_contains_key(fake_gsettings):
    assert gsettings.contains_key("org.example.demo", "font-name") is True
    assert gsettings.contains_key("org.example.demo", "missing") is False


def test_missing_command(no_gsettings):
    assert gsettings.version() == Version()
    assert gsettings.list_schemas() == []
    assert gsettings.contains_schema("org.example.demo") is False