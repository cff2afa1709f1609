"""Core test fixtures for the templatepub project."""

import os
from collections.abc import Generator
from pathlib import Path
from unittest.mock import Mock

import pytest
from typer.testing import CliRunner

from templatepub.config.models import PublishConfig, StorageConfig
from templatepub.protocols import StagingStoreProtocol
from templatepub.publish.models import Artifact
from templatepub.service.client import TemplateServiceClient
from tests.helpers import ImmediateScheduler


# ---- Test Isolation Fixtures ----


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Keep real user config and TEMPLATEPUB_* variables out of tests."""
    for key in list(os.environ):
        if key.startswith("TEMPLATEPUB_"):
            monkeypatch.delenv(key, raising=False)
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    yield work_dir


# ---- Scheduler and HTTP helpers ----


@pytest.fixture
def scheduler() -> ImmediateScheduler:
    return ImmediateScheduler()


# ---- Configuration Fixtures ----


@pytest.fixture
def publish_config() -> PublishConfig:
    """Configuration with credentials and a short batch timeout."""
    return PublishConfig(
        publish_host="typesafe.com",
        download_base_url="http://downloads.typesafe.com",
        username="publisher",
        password="secret",
        poll_interval=2.0,
        batch_timeout=30.0,
        storage=StorageConfig(bucket="test-bucket", key_prefix="play/templates"),
    )


@pytest.fixture
def service_client() -> TemplateServiceClient:
    return TemplateServiceClient("https://typesafe.com", "publisher", "secret")


@pytest.fixture
def mock_store() -> Mock:
    """Staging store double with the default key layout."""
    store = Mock(spec=StagingStoreProtocol)
    store.template_dir.side_effect = lambda revision: f"play/templates/{revision}/"
    return store


@pytest.fixture
def artifacts() -> list[Artifact]:
    return [
        Artifact(name="play-scala", remote_key="play/templates/abc123/play-scala.zip"),
        Artifact(name="play-java", remote_key="play/templates/abc123/play-java.zip"),
    ]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Typer CLI test runner."""
    return CliRunner()
