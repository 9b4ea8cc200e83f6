"""Flink SQL engine launch bindings.

Wires the generic resolvers to the Flink layout:

- engine home:  ``$FLINK_ENGINE_HOME`` or ``<install>/externals/kyuubi-flink-sql-engine``
- Flink home:   ``$FLINK_HOME`` or ``<install>/externals/kyuubi-download/target/flink-*``
- main jar:     ``kyuubi.session.engine.flink.main.resource`` or the conventional jar
- binary:       ``<engine home>/bin/flink-sql-engine.sh``
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from kyuubi_launcher.engine.conf import EngineConf
from kyuubi_launcher.engine.models import EngineIdentity, LaunchSpec, ResolutionContext, render_command
from kyuubi_launcher.engine.resolution.assembler import EngineEnvKeys, LaunchSpecAssembler
from kyuubi_launcher.engine.resolution.home import HomeDirectoryResolver
from kyuubi_launcher.engine.resolution.resource import ResourceArtifactResolver
from kyuubi_launcher.engine.resolution.workdir import WorkingDirectoryProvisioner
from kyuubi_launcher.engine.settings import LauncherSettings, get_settings

FLINK_ENGINE_HOME = "FLINK_ENGINE_HOME"
FLINK_HOME = "FLINK_HOME"
FLINK_ENGINE_BINARY_FILE = "flink-sql-engine.sh"

ENGINE_FLINK_MAIN_RESOURCE = "kyuubi.session.engine.flink.main.resource"

# YARN application tagging keys understood by the engine
APP_KEY = "yarn.application.name"
TAG_KEY = "yarn.tags"

FLINK_ENV_KEYS = EngineEnvKeys(
    home=FLINK_HOME,
    conf_dir="FLINK_CONF_DIR",
    main_resource="FLINK_SQL_ENGINE_JAR",
    dynamic_args="FLINK_SQL_ENGINE_DYNAMIC_ARGS",
)


def flink_identity(settings: LauncherSettings) -> EngineIdentity:
    return EngineIdentity(
        module="kyuubi-flink-sql-engine",
        main_class="org.apache.kyuubi.engine.flink.FlinkSQLEngine",
        version=settings.kyuubi_version,
        binary_file=FLINK_ENGINE_BINARY_FILE,
        family="flink",
        binary_compat_version=settings.scala_compile_version,
    )


def flink_assembler(settings: LauncherSettings | None = None) -> LaunchSpecAssembler:
    """Assembler for the Flink SQL engine using ``settings`` (default: cached settings)."""
    settings = settings or get_settings()
    identity = flink_identity(settings)
    return LaunchSpecAssembler(
        identity,
        engine_home=HomeDirectoryResolver(
            FLINK_ENGINE_HOME,
            ("externals", identity.module),
            engine_name="Flink",
            marker=settings.server_marker,
            docs_url=settings.docs_url,
        ),
        runtime_home=HomeDirectoryResolver(
            FLINK_HOME,
            ("externals", "kyuubi-download", "target"),
            engine_name="Flink",
            prefix=f"{identity.family}-",
            marker=settings.server_marker,
            docs_url=settings.docs_url,
        ),
        resource=ResourceArtifactResolver(identity, config_key=ENGINE_FLINK_MAIN_RESOURCE),
        working_dir=WorkingDirectoryProvisioner(),
        env_keys=FLINK_ENV_KEYS,
    )


class FlinkProcessBuilder:
    """Launch spec builder for one proxy user's Flink SQL engine.

    Holds only its inputs.  Every property re-resolves against the
    filesystem, so ``working_dir`` and ``build()`` provision a directory on
    each access.
    """

    def __init__(
        self,
        proxy_user: str,
        conf: EngineConf,
        *,
        env: Mapping[str, str] | None = None,
        code_location: Path | None = None,
        cwd: Path | None = None,
        settings: LauncherSettings | None = None,
    ) -> None:
        self.proxy_user = proxy_user
        self.conf = conf
        base = ResolutionContext.from_environ(proxy_user)
        self.context = ResolutionContext(
            env=dict(base.env if env is None else env),
            code_location=code_location or base.code_location,
            cwd=cwd or base.cwd,
            proxy_user=proxy_user,
            main_resource=conf.get(ENGINE_FLINK_MAIN_RESOURCE),
        )
        self._assembler = flink_assembler(settings)

    @property
    def module(self) -> str:
        return self._assembler.identity.module

    @property
    def main_class(self) -> str:
        return self._assembler.identity.main_class

    @property
    def flink_home(self) -> str:
        return self._assembler.runtime_home.resolve(self.context)

    @property
    def engine_home(self) -> str:
        return self._assembler.engine_home.resolve(self.context)

    @property
    def executable(self) -> str:
        return self._assembler.executable(self.context)

    @property
    def main_resource(self) -> str | None:
        return self._assembler.resource.resolve(self.context)

    @property
    def child_proc_env(self) -> dict[str, str]:
        return self._assembler.child_env(self.context, self.conf)

    @property
    def commands(self) -> list[str]:
        return self._assembler.commands(self.context)

    @property
    def working_dir(self) -> Path:
        return self._assembler.working_dir.provision(self.context)

    def use_keytab(self) -> bool:
        # Kerberos is not supported for the Flink engine.
        return False

    def build(self) -> LaunchSpec:
        return self._assembler.assemble(self.context, self.conf)

    def __str__(self) -> str:
        return render_command(self.commands)
