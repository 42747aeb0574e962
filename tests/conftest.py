"""Pytest configuration and shared fixtures."""

import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from tests.helpers.fake_daemon import FakeDaemon

# ============================================================================
# Environment Isolation
# ============================================================================
# Keep tests from reading the user's config file or talking to a real daemon
# through HANDSFREE_SOCKET / XDG_RUNTIME_DIR.


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point config and runtime directories at temporary locations.

    Returns:
        The temporary XDG_CONFIG_HOME directory.
    """
    config_home = tmp_path / "xdg_config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("XDG_RUNTIME_DIR", str(tmp_path / "xdg_runtime"))
    monkeypatch.delenv("HANDSFREE_SOCKET", raising=False)
    monkeypatch.delenv("HANDSFREECTL_LOG", raising=False)
    return config_home


# ============================================================================
# Socket Fixtures
# ============================================================================


@pytest.fixture
def temp_socket_path() -> Iterator[Path]:
    """Temporary socket path for testing.

    Uses a short base path (/tmp) to avoid AF_UNIX path length limits
    (~104 chars on macOS, 108 on Linux). The pytest tmp_path can exceed this.
    """
    short_tmp = tempfile.mkdtemp(prefix="hf_", dir="/tmp")
    socket_path = Path(short_tmp) / "d.sock"
    yield socket_path
    socket_path.unlink(missing_ok=True)
    Path(short_tmp).rmdir()


@pytest.fixture
def fake_daemon(temp_socket_path: Path) -> Iterator[FakeDaemon]:
    """Running scripted daemon listening on temp_socket_path."""
    daemon = FakeDaemon(temp_socket_path).start()
    yield daemon
    daemon.stop()
