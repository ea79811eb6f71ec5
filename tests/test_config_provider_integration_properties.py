"""Integration tests for configuration, the store provider and the sync script.

Feature: incremental-file-sync
"""

import argparse
import json
import tempfile
from pathlib import Path

import structlog
from hypothesis import given, settings
from hypothesis import strategies as st

from scripts.sync_files import perform_sync
from src.providers import get_store
from src.storage.store import LocalCopyStore
from src.utils.config_loader import ConfigLoader

log = structlog.stdlib.get_logger()

CONFIG_TEMPLATE = """
sync:
  entry: "site"
  ext: "{ext}"
  glob:
    ignore: ["sync.json"]
store:
  type: "local"
  config:
    dest_dir: "{dest}"
    versioned: {versioned}
logging:
  log_level: "WARNING"
  json_logs: true
"""


def _args(config_path: Path, cwd: Path, **overrides) -> argparse.Namespace:
    values = {
        "config": str(config_path),
        "entry": None,
        "ext": None,
        "log_file": None,
        "cwd": str(cwd),
        "dest": None,
        "no_save_log": False,
        "confirm": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


def _setup(root: Path, ext: str = "", versioned: str = "true") -> Path:
    for key, content in {"a.md": "alpha", "b.txt": "beta", "docs/c.md": "gamma"}.items():
        path = root / "site" / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)

    config_path = root / "config.yaml"
    config_path.write_text(
        CONFIG_TEMPLATE.format(ext=ext, dest=(root / "dist").as_posix(), versioned=versioned)
    )
    return config_path


@settings(deadline=None, max_examples=10)
@given(versioned=st.booleans(), hash_length=st.integers(min_value=4, max_value=16))
def test_property_21_configuration_supports_store_provider(versioned: bool, hash_length: int):
    """Property 21: Configuration supports the store provider.

    For any valid store section, the loaded configuration SHALL provide the
    parameters get_store() needs to build a working store.

    **Feature: incremental-file-sync, Property 21: Configuration supports the store provider**
    """
    log.info("test_property_21_store_config", versioned=versioned, hash_length=hash_length)

    with tempfile.TemporaryDirectory() as tmp_dir:
        config_path = Path(tmp_dir) / "config.yaml"
        config_path.write_text(
            "store:\n"
            "  type: local\n"
            "  config:\n"
            f"    dest_dir: {Path(tmp_dir).as_posix()}/out\n"
            f"    versioned: {str(versioned).lower()}\n"
            f"    hash_length: {hash_length}\n"
        )

        config = ConfigLoader().load_config(str(config_path))
        store = get_store(config.store)

        assert isinstance(store, LocalCopyStore)
        assert store.versioned is versioned
        assert store.hash_length == hash_length


def test_sync_script_runs_incrementally():
    """Test two script runs: the first syncs everything, the second nothing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        root = Path(tmp_dir)
        config_path = _setup(root)

        first = perform_sync(_args(config_path, root))
        second = perform_sync(_args(config_path, root))

        assert first["success"] is True
        assert first["total_files"] == 3
        assert first["changed_files"] == 3
        assert first["synced_files"] == 3
        assert first["failed_files"] == []
        assert second["changed_files"] == 0
        assert second["synced_files"] == 0

        sync_log = json.loads((root / "sync.json").read_text())
        assert sorted(sync_log["files"]) == ["a.md", "b.txt", "docs/c.md"]
        for entry in sync_log["files"].values():
            assert (root / "dist" / entry["verPath"]).exists()


def test_sync_script_overrides():
    """Test that command line flags override the configuration file."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        root = Path(tmp_dir)
        config_path = _setup(root, versioned="false")

        stats = perform_sync(
            _args(config_path, root, ext="md", dest=str(root / "elsewhere"), no_save_log=True)
        )

        assert stats["success"] is True
        assert stats["total_files"] == 2
        assert (root / "elsewhere" / "a.md").read_text() == "alpha"
        assert (root / "elsewhere" / "docs" / "c.md").read_text() == "gamma"
        assert not (root / "sync.json").exists()


def test_sync_script_reports_configuration_errors():
    """Test that a broken configuration file is reported, not raised."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        config_path = Path(tmp_dir) / "config.yaml"
        config_path.write_text("sync: [unclosed")

        stats = perform_sync(_args(config_path, Path(tmp_dir)))

        assert stats["success"] is False
        assert "Failed to parse YAML" in stats["error"]
