"""Tests for TOML-backed configuration."""

import pytest

from codeflow_cli import config
from codeflow_cli import config_manager as cm


def test_defaults_without_file():
    assert cm.load_full_config() == {}
    export = cm.load_export_config()
    assert export["max_text_size"] == config.DEFAULT_MAX_TEXT_SIZE
    assert export["timeout"] == config.DEFAULT_EXPORT_TIMEOUT

    policy = cm.load_scan_policy()
    assert policy.ignore_patterns == config.DEFAULT_IGNORES
    assert policy.extensions == config.TEXT_EXTENSIONS


def test_set_value_persists_and_coerces():
    assert cm.set_value("export.max_text_size", "90000") == 90000
    assert cm.set_value("scan.extra_ignores", "/vendor/, /tmp/") == ["/vendor/", "/tmp/"]
    assert cm.set_value("scan.include_extensionless", "no") is False

    assert cm.load_export_config()["max_text_size"] == 90000
    policy = cm.load_scan_policy(extra_ignores=["/cache/"])
    assert policy.ignore_patterns[-3:] == ("/vendor/", "/tmp/", "/cache/")
    assert policy.include_extensionless is False


def test_extensions_are_normalized():
    cm.set_value("scan.extensions", "TS, .js")
    assert cm.load_scan_policy().extensions == frozenset({".ts", ".js"})


def test_unknown_and_invalid_values():
    with pytest.raises(KeyError):
        cm.set_value("export.colour", "red")
    with pytest.raises(ValueError):
        cm.set_value("export.max_text_size", "lots")
    with pytest.raises(ValueError):
        cm.set_value("export.timeout", "-5")


def test_invalid_toml_falls_back_to_defaults():
    config.ensure_base_dirs()
    config.CONFIG_FILE.write_text("this is = = not toml", encoding="utf-8")
    assert cm.load_full_config() == {}
    assert cm.load_export_config()["max_text_size"] == config.DEFAULT_MAX_TEXT_SIZE


def test_bad_number_in_file_uses_default():
    config.ensure_base_dirs()
    config.CONFIG_FILE.write_text('[export]\nmax_text_size = "huge"\n', encoding="utf-8")
    assert cm.load_export_config()["max_text_size"] == config.DEFAULT_MAX_TEXT_SIZE


def test_reset():
    cm.set_value("export.timeout", "30")
    assert cm.reset_config() is True
    assert cm.reset_config() is False
    assert cm.load_export_config()["timeout"] == config.DEFAULT_EXPORT_TIMEOUT
