from pathlib import Path
from typing import Generator

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing CLI commands."""
    return CliRunner()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Analytics cache directory for the test. Not created up front."""
    return tmp_path / "cache" / "analytics"


@pytest.fixture(autouse=True)
def setup_test_analytics_env(
    tmp_path: Path,
    cache_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> Generator[None, None, None]:
    """Point HOME and the analytics cache at the test's temp directory."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("ANALYTICS_CACHE_DIR", str(cache_dir))
    monkeypatch.delenv("ANALYTICS_ROOT_NAME", raising=False)

    assert Path("~").expanduser() == tmp_path

    yield
