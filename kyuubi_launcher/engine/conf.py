"""Operator-provided engine configuration.

Settings are plain string pairs kept in insertion order.  Keys under the
``kyuubi.engineEnv.`` prefix double as environment variables for the engine
process, e.g. ``kyuubi.engineEnv.JAVA_HOME=/opt/jdk`` becomes ``JAVA_HOME``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pydantic import BaseModel, Field

ENGINE_ENV_PREFIX = "kyuubi.engineEnv."


class EngineConf(BaseModel):
    settings: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_pairs(cls, pairs: Iterable[str]) -> EngineConf:
        """Parse ``KEY=VALUE`` strings.  Raises ``ValueError`` on malformed input."""
        settings: dict[str, str] = {}
        for pair in pairs:
            key, sep, value = pair.partition("=")
            key = key.strip()
            if not sep or not key:
                msg = f"Invalid configuration '{pair}', expected KEY=VALUE"
                raise ValueError(msg)
            settings[key] = value
        return cls(settings=settings)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.settings.get(key, default)

    def set(self, key: str, value: str) -> EngineConf:
        self.settings[key] = value
        return self

    def get_all(self) -> dict[str, str]:
        return dict(self.settings)

    def get_envs(self, env: Mapping[str, str]) -> dict[str, str]:
        """Environment snapshot overlaid with ``kyuubi.engineEnv.*`` settings."""
        envs = dict(env)
        for key, value in self.settings.items():
            if key.startswith(ENGINE_ENV_PREFIX) and len(key) > len(ENGINE_ENV_PREFIX):
                envs[key[len(ENGINE_ENV_PREFIX) :]] = value
        return envs
