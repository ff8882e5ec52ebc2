"""
Pytest configuration and shared fixtures for opamkit tests.
"""

import pytest
import tempfile
from pathlib import Path
from typing import Generator

from opamkit.core.environment import JobEnvironment
from opamkit.core.platform import PlatformDescriptor, clear_platform_cache
from opamkit.provision.strategy import ProvisionContext
from tests.mocks import FakeRunner, FakeToolCache, InMemoryCache


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_home(temp_dir: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = temp_dir / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Forget the detected platform between tests."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def linux_platform() -> PlatformDescriptor:
    return PlatformDescriptor("linux", "x64", "5.15.0-1036-azure")


@pytest.fixture
def darwin_platform() -> PlatformDescriptor:
    return PlatformDescriptor("darwin", "x64", "19.6.0")


@pytest.fixture
def windows_platform() -> PlatformDescriptor:
    return PlatformDescriptor("win32", "x64", "10.0.17763")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def memory_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def fake_tool_cache(temp_dir: Path) -> FakeToolCache:
    return FakeToolCache(root=temp_dir / "toolcache", temp_dir=temp_dir / "runner-temp")


@pytest.fixture
def job_environment(temp_dir: Path) -> JobEnvironment:
    """Job environment writing to temporary GITHUB_PATH/GITHUB_ENV files."""
    return JobEnvironment(
        environ={"PATH": "/usr/bin"},
        path_file=temp_dir / "github_path",
        env_file=temp_dir / "github_env",
    )


@pytest.fixture
def make_context(temp_dir, fake_runner, memory_cache, fake_tool_cache, job_environment):
    """Factory for provisioning contexts built from the fakes."""

    def _make(platform: PlatformDescriptor, **overrides) -> ProvisionContext:
        values = dict(
            platform=platform,
            runner=fake_runner,
            tool_cache=fake_tool_cache,
            environment=job_environment,
            cache=memory_cache,
            script_dir=temp_dir / "scripts",
        )
        values.update(overrides)
        return ProvisionContext(**values)

    return _make
