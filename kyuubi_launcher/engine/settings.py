"""Launcher configuration loaded from KYUUBI_LAUNCHER_* environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from kyuubi_launcher.engine.errors import DOCS_URL


class LauncherSettings(BaseSettings):
    """Settings of the launcher process itself.

    All fields are read from environment variables with the ``KYUUBI_LAUNCHER_``
    prefix.  For example, ``KYUUBI_LAUNCHER_LOG_LEVEL=DEBUG`` maps to ``log_level``.

    Engine locations (FLINK_HOME, KYUUBI_HOME, ...) are **not** managed here --
    they are read from the resolution context's environment snapshot so every
    resolver can be driven by an injected mapping.
    """

    model_config = SettingsConfigDict(
        env_prefix="KYUUBI_LAUNCHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"
    log_json: bool = False
    """Emit one JSON document per log line instead of the coloured text format."""

    # -- Install tree ----------------------------------------------------------
    server_marker: str = "kyuubi_launcher"
    """Path segment the running code is split on to find the install-tree root."""

    docs_url: str = DOCS_URL
    """Documentation link included in configuration error messages."""

    # -- Build versions --------------------------------------------------------
    kyuubi_version: str = "1.5.0-incubating"
    scala_compile_version: str = "2.12"
    """Binary compatibility version embedded in engine jar names."""


def get_settings() -> LauncherSettings:
    """Return a cached settings instance.

    Call ``_get_settings_cached.cache_clear()`` in tests to force a re-read after
    overriding env vars.
    """
    return _get_settings_cached()


@lru_cache(maxsize=1)
def _get_settings_cached() -> LauncherSettings:
    return LauncherSettings()
