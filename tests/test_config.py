"""
Unit tests for shared.config.
"""

from shared import config
from shared.config import load_config


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "CONFIG_LOCATIONS", [tmp_path / "absent.toml"])
    cfg = load_config()

    assert cfg.get("output", "show_non_ok") is False
    assert cfg.get("output", "color") is True
    assert cfg.get("host", "root") == "/"
    assert cfg._source is None


def test_explicit_file_overrides_defaults(tmp_path):
    path = tmp_path / "check.toml"
    path.write_text('[report]\njson_path = "/tmp/out.json"\n\n[host]\nroot = "/mnt/sysroot"\n')
    cfg = load_config(str(path))

    assert cfg.get("report", "json_path") == "/tmp/out.json"
    assert cfg.get("host", "root") == "/mnt/sysroot"
    assert cfg.get("output", "color") is True
    assert cfg._source == str(path)


def test_first_location_wins(tmp_path, monkeypatch):
    first, second = tmp_path / "a.toml", tmp_path / "b.toml"
    first.write_text("[output]\ncolor = false\n")
    second.write_text("[output]\ncolor = true\nshow_non_ok = true\n")
    monkeypatch.setattr(config, "CONFIG_LOCATIONS", [first, second])
    cfg = load_config()

    assert cfg.get("output", "color") is False
    assert cfg.get("output", "show_non_ok") is False


def test_broken_file_is_ignored(tmp_path, caplog):
    path = tmp_path / "broken.toml"
    path.write_text("[output\ncolor = ")
    cfg = load_config(str(path))

    assert cfg.get("output", "color") is True
    assert "Ignoring config file" in caplog.text


def test_unknown_section_is_reported(tmp_path, caplog):
    path = tmp_path / "extra.toml"
    path.write_text("[rules]\nstrict = true\n")
    load_config(str(path))

    assert "Unknown config section [rules]" in caplog.text


def test_missing_explicit_file(tmp_path, caplog):
    cfg = load_config(str(tmp_path / "nope.toml"))

    assert cfg._source is None
    assert "not found" in caplog.text
