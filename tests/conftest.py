"""Shared fixtures: a fake install tree and resolution contexts.

Everything lives under ``tmp_path``; no test touches the real environment,
the real temp directory, or the launcher's own install location.
"""

from __future__ import annotations

import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from loguru import logger

from kyuubi_launcher.engine.models import ResolutionContext
from kyuubi_launcher.engine.settings import LauncherSettings, _get_settings_cached

type ContextFactory = Callable[..., ResolutionContext]


@pytest.fixture(autouse=True)
def _isolate_settings_and_logging() -> Iterator[None]:
    _get_settings_cached.cache_clear()
    yield
    _get_settings_cached.cache_clear()
    logger.remove()


@pytest.fixture
def settings() -> LauncherSettings:
    return LauncherSettings(_env_file=None)


@pytest.fixture
def system_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect ``tempfile``'s default directory into the test's tmp_path."""
    path = tmp_path / "system-tmp"
    path.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(path))
    return path


@pytest.fixture
def install_tree(tmp_path: Path) -> Path:
    """Root of a fake install: ``{root}/kyuubi_launcher/engine/models.py``."""
    root = tmp_path / "install"
    (root / "kyuubi_launcher" / "engine").mkdir(parents=True)
    return root


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Working directory of the launcher process."""
    path = tmp_path / "workspace" / "kyuubi"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def make_context(install_tree: Path, workspace: Path) -> ContextFactory:
    def _make(
        env: dict[str, str] | None = None,
        *,
        proxy_user: str = "alice",
        main_resource: str | None = None,
        code_location: Path | None = None,
        cwd: Path | None = None,
    ) -> ResolutionContext:
        return ResolutionContext(
            env=env or {},
            code_location=code_location or install_tree / "kyuubi_launcher" / "engine" / "models.py",
            cwd=cwd or workspace,
            proxy_user=proxy_user,
            main_resource=main_resource,
        )

    return _make

