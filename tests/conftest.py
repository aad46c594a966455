"""Shared fixtures."""

import pytest


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Point config, cache and data directories at a temp dir.

    Returns:
        Dict with 'config', 'cache' and 'data' paths
    """
    paths = {
        "config": tmp_path / "config",
        "cache": tmp_path / "cache",
        "data": tmp_path / "data",
    }
    for path in paths.values():
        path.mkdir()

    monkeypatch.setenv("VEST_CALC_CONFIG_PATH", str(paths["config"]))
    monkeypatch.setenv("XDG_CACHE_HOME", str(paths["cache"]))
    monkeypatch.setenv("XDG_DATA_HOME", str(paths["data"]))
    return paths
