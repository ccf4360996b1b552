import os
from pathlib import Path

import pytest

from sitebox.core.settings import SiteboxSettings
from sitebox.integrations.containers.lifecycle import ReadinessWaiter
from tests.helpers.fakes import FakeBackend, FakeClock

CONTENT_REPO = "github.com/carolynvs/example-site-content"


# --- Global Test Configuration ---


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """
    Removes sitebox environment variables so settings start from defaults.
    This prevents the developer's shell configuration from leaking into tests.
    """
    for name in list(os.environ):
        if name.startswith("SITEBOX_") or name in {"PORT", "CONTENT_REPOS"}:
            monkeypatch.delenv(name, raising=False)
    yield


# --- Core Fixtures ---


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """
    A site checkout with a manifest and the theme submodule present.
    Lives one level below ``tmp_path`` so sibling content checkouts can be
    created next to it.
    """
    path = tmp_path / "site"
    (path / "themes" / "docsy").mkdir(parents=True)
    (path / "go.mod").write_text(
        "module github.com/carolynvs/example-site\n\n"
        f"require {CONTENT_REPO} v0.1.0\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def settings(site_dir: Path) -> SiteboxSettings:
    return SiteboxSettings(workdir=site_dir)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def waiter(backend: FakeBackend, clock: FakeClock) -> ReadinessWaiter:
    return ReadinessWaiter(backend.logs, clock=clock, sleep=clock.sleep)
