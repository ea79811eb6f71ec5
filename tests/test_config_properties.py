"""Property-based tests for configuration models and loading.

Feature: incremental-file-sync
"""

import os
import tempfile
from pathlib import Path

import pytest
import structlog
from hypothesis import given
from hypothesis import strategies as st

from src.models import AppConfig, ChangeOptions, SyncOptions
from src.utils.config_loader import ConfigLoader, ConfigurationError

log = structlog.stdlib.get_logger()


@given(st.floats(max_value=0, allow_nan=False))
def test_confirm_timeout_must_be_positive(timeout: float):
    """Test that non-positive confirmation timeouts are rejected."""
    log.info("test_confirm_timeout_must_be_positive", timeout=timeout)

    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        SyncOptions(confirm_timeout=timeout)


def test_sync_option_defaults():
    """Test the documented defaults of a sync run."""
    options = SyncOptions()

    assert options.log_file == "sync.json"
    assert options.save_log is True
    assert options.confirm is False
    assert options.confirm_timeout is None
    assert options.change == ChangeOptions()
    assert options.glob.pattern == "**/*"


def test_environment_variable_loading():
    """Test that APP_* environment variables populate nested settings."""
    env = {
        "APP_SYNC__ENTRY": "docs",
        "APP_SYNC__EXT": "md",
        "APP_SYNC__SAVE_LOG": "false",
        "APP_STORE__TYPE": "local",
        "APP_LOGGING__LOG_LEVEL": "DEBUG",
    }
    os.environ.update(env)

    try:
        config = AppConfig()

        assert config.sync.entry == "docs"
        assert config.sync.ext == "md"
        assert config.sync.save_log is False
        assert config.store.type == "local"
        assert config.logging.log_level == "DEBUG"
    finally:
        for key in env:
            os.environ.pop(key, None)


def test_configuration_file_parsing():
    """Test that a YAML file with ${VAR} references loads into AppConfig."""
    log.info("test_configuration_file_parsing")

    yaml_content = """
sync:
  entry: "content"
  ext: ".md"
  log_file: "state/sync.json"
  confirm: true
  confirm_timeout: 30
  glob:
    ignore: ["drafts/*"]
  change:
    compare_mtime: false
    hash_algorithm: "md5"
store:
  type: "local"
  config:
    dest_dir: "${SYNC_TEST_DEST}"
logging:
  log_level: "WARNING"
"""

    with tempfile.TemporaryDirectory() as tmp_dir:
        config_path = Path(tmp_dir) / "config.yaml"
        config_path.write_text(yaml_content)
        os.environ["SYNC_TEST_DEST"] = "/srv/dest"

        try:
            config = ConfigLoader().load_config(str(config_path))
        finally:
            os.environ.pop("SYNC_TEST_DEST", None)

    assert config.sync.entry == "content"
    assert config.sync.confirm_timeout == 30
    assert config.sync.glob.ignore == ["drafts/*"]
    assert config.sync.change.compare_mtime is False
    assert config.sync.change.hash_algorithm == "md5"
    assert config.store.config["dest_dir"] == "/srv/dest"
    assert config.logging.log_level == "WARNING"


def test_missing_environment_variable_is_an_error():
    """Test that an unset ${VAR} reference raises ConfigurationError."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        config_path = Path(tmp_dir) / "config.yaml"
        config_path.write_text('store:\n  config:\n    dest_dir: "${SYNC_TEST_UNSET_VAR}"\n')

        with pytest.raises(ConfigurationError, match="SYNC_TEST_UNSET_VAR"):
            ConfigLoader().load_config(str(config_path))


@pytest.mark.parametrize(
    "content",
    ["", "sync: [unclosed", "- just\n- a list\n", "sync:\n  change:\n    hash_algorithm: nope\n"],
)
def test_invalid_configuration_files(content: str):
    """Test that empty, malformed or invalid files raise ConfigurationError."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        config_path = Path(tmp_dir) / "config.yaml"
        config_path.write_text(content)

        with pytest.raises(ConfigurationError):
            ConfigLoader().load_config(str(config_path))


def test_missing_configuration_file():
    """Test that a missing file raises ConfigurationError."""
    with pytest.raises(ConfigurationError):
        ConfigLoader().load_config("/nonexistent/config.yaml")


def test_default_config_path_uses_app_env():
    """Test APP_ENV selection with fallback to default.yaml."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        config_dir = Path(tmp_dir)
        (config_dir / "default.yaml").write_text('sync:\n  entry: "default"\n')
        (config_dir / "staging.yaml").write_text('sync:\n  entry: "staging"\n')
        loader = ConfigLoader(config_dir=config_dir)

        os.environ["APP_ENV"] = "staging"
        try:
            assert loader.load_config().sync.entry == "staging"
            os.environ["APP_ENV"] = "production"
            assert loader.load_config().sync.entry == "default"
        finally:
            os.environ.pop("APP_ENV", None)


def test_shipped_default_configuration_loads():
    """Test that config/default.yaml is valid."""
    config = ConfigLoader().load_config(
        str(Path(__file__).parent.parent / "config" / "default.yaml")
    )

    assert config.store.type == "local"
    assert "sync.json" in config.sync.glob.ignore


def test_validate_config_warnings():
    """Test warnings for valid but suspicious settings."""
    config = AppConfig(
        sync=SyncOptions(
            confirm=True,
            save_log=False,
            change=ChangeOptions(compare_size=False, compare_mtime=False, compare_hash=False),
        ),
        store={"type": "ftp"},
    )

    warnings = ConfigLoader().validate_config(config)

    assert len(warnings) == 4
    assert ConfigLoader().validate_config(AppConfig()) == []
