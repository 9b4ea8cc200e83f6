"""Data types shared by the resolvers and the launch spec assembler."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class EngineIdentity(BaseModel):
    """Static description of an engine.  Created once, never mutated."""

    model_config = ConfigDict(frozen=True)

    module: str
    main_class: str
    version: str
    binary_file: str
    family: str
    """Engine family name, e.g. ``flink``.  Used in install paths and dir prefixes."""

    binary_compat_version: str
    """Opaque compatibility tag (the Scala version for JVM engines)."""

    @property
    def jar_name(self) -> str:
        """Conventional artifact name: ``{module}_{compat}-{version}.jar``."""
        return f"{self.module}_{self.binary_compat_version}-{self.version}.jar"


class ResolutionContext(BaseModel):
    """Inputs available to every resolver.

    The environment is a snapshot; resolvers never read ``os.environ``
    themselves.  Relative paths are interpreted against ``cwd``.
    """

    model_config = ConfigDict(frozen=True)

    env: dict[str, str] = Field(default_factory=dict)
    code_location: Path
    """Filesystem location of the running launcher code."""

    cwd: Path
    proxy_user: str
    main_resource: str | None = None
    """User-specified main resource, a local path or any URI."""

    @classmethod
    def from_environ(cls, proxy_user: str, *, main_resource: str | None = None) -> ResolutionContext:
        """Snapshot the live process state."""
        return cls(
            env=dict(os.environ),
            code_location=Path(__file__).resolve(),
            cwd=Path.cwd(),
            proxy_user=proxy_user,
            main_resource=main_resource,
        )

    def absolute(self, path: str | Path) -> Path:
        return self.cwd / path


def render_command(commands: Sequence[str]) -> str:
    """Join tokens for display; ``--`` options go on indented continuation lines."""
    return " ".join(f"\\\n\t{arg}" if arg.startswith("--") else arg for arg in commands)


class LaunchSpec(BaseModel):
    """Everything the process-spawning collaborator needs to start the engine."""

    executable: str
    commands: list[str]
    env: dict[str, str]
    working_dir: Path

    def popen_kwargs(self) -> dict[str, object]:
        """Keyword arguments for ``subprocess.Popen``.  Nothing is started here."""
        return {"args": list(self.commands), "env": dict(self.env), "cwd": str(self.working_dir)}

    def __str__(self) -> str:
        return render_command(self.commands)
