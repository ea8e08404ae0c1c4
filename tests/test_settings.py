import json
import logging

import pytest

from stepwire.errors import ConfigurationError
from stepwire.settings import InjectionSettings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("STEPWIRE_CONFIG", "STEPWIRE_MAX_DEPTH", "STEPWIRE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def restore_logger_level():
    logger = logging.getLogger("stepwire")
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_defaults_without_settings_file():
    assert InjectionSettings.load() == InjectionSettings(max_depth=32, log_level="WARNING")


def test_default_settings_file_is_read(tmp_path):
    (tmp_path / "stepwire.yaml").write_text("injection:\n  max_depth: 4\n  log_level: DEBUG\n")

    assert InjectionSettings.load() == InjectionSettings(max_depth=4, log_level="DEBUG")


def test_settings_file_from_environment(monkeypatch, tmp_path):
    config = tmp_path / "elsewhere.json"
    config.write_text(json.dumps({"injection": {"max_depth": 7}}))
    monkeypatch.setenv("STEPWIRE_CONFIG", str(config))

    assert InjectionSettings.load().max_depth == 7


def test_environment_overrides_file(monkeypatch, tmp_path):
    config = tmp_path / "settings.yml"
    config.write_text("injection:\n  max_depth: 4\n")
    monkeypatch.setenv("STEPWIRE_MAX_DEPTH", "9")
    monkeypatch.setenv("STEPWIRE_LOG_LEVEL", "info")

    settings = InjectionSettings.load(config)

    assert settings.max_depth == 9
    assert settings.log_level == "info"


def test_file_without_injection_section_uses_defaults(tmp_path):
    config = tmp_path / "stepwire.yaml"
    config.write_text("other: {}\n")

    assert InjectionSettings.load(config) == InjectionSettings()


@pytest.mark.parametrize(
    "content, message",
    [
        ("injection:\n  max_depth: 0\n", "max_depth must be a positive integer"),
        ("injection:\n  max_depth: true\n", "max_depth must be a positive integer"),
        ("injection:\n  max_depth: deep\n", "max_depth must be a positive integer"),
        ("injection:\n  log_level: CHATTY\n", "Unknown log level"),
        ("injection:\n  retries: 3\n", "Unknown injection settings"),
        ("injection: [1, 2]\n", "must be a mapping"),
        ("- 1\n- 2\n", "must contain a mapping"),
        ("injection: {max_depth: [\n", "Could not parse settings file"),
    ],
)
def test_invalid_settings_file_raises(tmp_path, content, message):
    config = tmp_path / "stepwire.yaml"
    config.write_text(content)

    with pytest.raises(ConfigurationError, match=message):
        InjectionSettings.load(config)


def test_invalid_depth_in_environment_raises(monkeypatch):
    monkeypatch.setenv("STEPWIRE_MAX_DEPTH", "lots")

    with pytest.raises(ConfigurationError, match="STEPWIRE_MAX_DEPTH must be an integer"):
        InjectionSettings.load()


def test_missing_or_unsupported_settings_file_raises(tmp_path):
    with pytest.raises(ConfigurationError, match="does not exist"):
        InjectionSettings.load(tmp_path / "missing.yaml")

    config = tmp_path / "stepwire.toml"
    config.write_text("")
    with pytest.raises(ConfigurationError, match="Unsupported settings format"):
        InjectionSettings.load(config)


def test_configure_logging_sets_package_logger_level(restore_logger_level):
    InjectionSettings(log_level="debug").configure_logging()

    assert restore_logger_level.level == logging.DEBUG
