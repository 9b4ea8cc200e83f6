"""Launcher exception hierarchy.

Soft absences (no artifact at a tier, no matching home subdirectory) are
``None`` results inside the resolvers.  Only mandatory requirements that never
materialized are raised, always with operator-facing remediation text.
"""

from __future__ import annotations

from pathlib import Path

DOCS_URL = "https://kyuubi.apache.org/docs/stable/deployment/settings.html#environments"


class LauncherError(Exception):
    """Base class for all launch resolution failures."""


class ConfigurationError(LauncherError):
    """A mandatory resolution tier could not be satisfied."""

    def __init__(self, message: str, *, env_key: str | None = None, docs_url: str = DOCS_URL) -> None:
        super().__init__(message)
        self.env_key = env_key
        self.docs_url = docs_url

    @classmethod
    def missing_env(cls, env_key: str, engine_name: str, docs_url: str = DOCS_URL) -> ConfigurationError:
        """Error for an unset ``*_HOME`` variable with no usable fallback."""
        msg = (
            f"{env_key} is not set! For more detail information on installing and configuring "
            f"{engine_name}, please visit {docs_url}"
        )
        return cls(msg, env_key=env_key, docs_url=docs_url)


class ResourceProvisioningError(LauncherError):
    """Filesystem failure while creating a working directory."""

    def __init__(self, path: Path | str, cause: OSError) -> None:
        super().__init__(f"Failed to provision working directory {path}: {cause}")
        self.path = Path(path)
