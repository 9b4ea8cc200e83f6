"""Launch spec assembly.

Combines the resolvers into the final executable, argument vector, child
environment and working directory.  The assembler keeps no state between
calls: re-running it against a changed filesystem may give a different spec.

Child environment layering (later entries win)::

    conf.get_envs(context.env)
    <HOME>              = runtime home
    <CONF_DIR>          = <runtime home>/conf
    <MAIN_RESOURCE>     = main jar
    <DYNAMIC_ARGS>      = "-Dk1=v1 -Dk2=v2 ..."
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict

from kyuubi_launcher.engine.conf import EngineConf
from kyuubi_launcher.engine.errors import ConfigurationError
from kyuubi_launcher.engine.models import EngineIdentity, LaunchSpec, ResolutionContext, render_command
from kyuubi_launcher.engine.resolution.home import HomeDirectoryResolver
from kyuubi_launcher.engine.resolution.resource import KYUUBI_HOME, ResourceArtifactResolver
from kyuubi_launcher.engine.resolution.workdir import WorkingDirectoryProvisioner


class EngineEnvKeys(BaseModel):
    """Names of the variables the engine's launch script reads."""

    model_config = ConfigDict(frozen=True)

    home: str
    conf_dir: str
    main_resource: str
    dynamic_args: str


def dynamic_args(conf: EngineConf) -> str:
    """Every configuration pair as ``-D<key>=<value>``, space separated."""
    return " ".join(f"-D{key}={value}" for key, value in conf.get_all().items())


class LaunchSpecAssembler:
    def __init__(
        self,
        identity: EngineIdentity,
        *,
        engine_home: HomeDirectoryResolver,
        runtime_home: HomeDirectoryResolver,
        resource: ResourceArtifactResolver,
        working_dir: WorkingDirectoryProvisioner,
        env_keys: EngineEnvKeys,
    ) -> None:
        self.identity = identity
        self.engine_home = engine_home
        self.runtime_home = runtime_home
        self.resource = resource
        self.working_dir = working_dir
        self.env_keys = env_keys

    def executable(self, context: ResolutionContext) -> str:
        """Canonical ``<engine home>/bin/<binary>``."""
        home = self.engine_home.resolve(context)
        return str(context.absolute(Path(home, "bin", self.identity.binary_file)).resolve())

    def main_resource(self, context: ResolutionContext) -> str:
        """Resolved main jar; raises ``ConfigurationError`` when no tier has one."""
        resource = self.resource.resolve(context)
        if resource is None:
            msg = (
                f"Cannot find the main resource {self.identity.jar_name} of {self.identity.module}. "
                f"Set '{self.resource.config_key}' or make sure ${KYUUBI_HOME} points to a Kyuubi distribution"
            )
            raise ConfigurationError(msg, env_key=KYUUBI_HOME)
        return resource

    def child_env(self, context: ResolutionContext, conf: EngineConf) -> dict[str, str]:
        runtime_home = self.runtime_home.resolve(context)
        main_resource = self.main_resource(context)

        env = conf.get_envs(context.env)
        env[self.env_keys.home] = runtime_home
        env[self.env_keys.conf_dir] = f"{runtime_home}/conf"
        env[self.env_keys.main_resource] = main_resource
        env[self.env_keys.dynamic_args] = dynamic_args(conf)
        return env

    def commands(self, context: ResolutionContext) -> list[str]:
        # Engine arguments travel through the environment, not argv.
        return [self.executable(context)]

    def assemble(self, context: ResolutionContext, conf: EngineConf) -> LaunchSpec:
        """Build the full spec.  Any failure aborts before a directory is created."""
        commands = self.commands(context)
        env = self.child_env(context, conf)
        working_dir = self.working_dir.provision(context)

        logger.info(
            "Launching {} for {} in {}: {}",
            self.identity.module,
            context.proxy_user,
            working_dir,
            render_command(commands),
        )
        return LaunchSpec(executable=commands[0], commands=commands, env=env, working_dir=working_dir)
