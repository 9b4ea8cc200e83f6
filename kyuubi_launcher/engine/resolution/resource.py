"""Main resource (engine jar) resolution.

Resolution order, first existing path wins:

1. User-specified value (``context.main_resource``).  Values without a URI
   scheme, or with ``file:``, must exist locally and are returned as canonical
   paths; any other scheme (``hdfs``, ``s3``, ...) is returned unchecked for
   the engine runtime to fetch.
2. ``$KYUUBI_HOME/externals/engines/<family>/<jar>`` (binary distribution).
3. ``externals/<module>/target/<jar>`` under the working directory, then one
   level up (source checkout after a local build).

Absence is not an error here; the assembler decides whether it is fatal.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path
from urllib.parse import unquote, urlparse

from kyuubi_launcher.engine.models import EngineIdentity, ResolutionContext
from kyuubi_launcher.engine.resolution.chain import first_resolved

KYUUBI_HOME = "KYUUBI_HOME"


class ResourceArtifactResolver:
    def __init__(self, identity: EngineIdentity, *, config_key: str) -> None:
        self.identity = identity
        self.config_key = config_key

    def resolve(self, context: ResolutionContext) -> str | None:
        return first_resolved(
            [
                ("user specified", partial(self._user_specified, context)),
                (KYUUBI_HOME, partial(self._from_kyuubi_home, context)),
                ("dev checkout", partial(self._from_dev_checkout, context)),
            ]
        )

    def _user_specified(self, context: ResolutionContext) -> str | None:
        specified = context.main_resource
        if not specified:
            return None
        uri = urlparse(specified)
        if (uri.scheme or "file") != "file":
            return specified
        local = context.absolute(unquote(uri.path) if uri.scheme else specified)
        return str(local.resolve()) if local.exists() else None

    def _from_kyuubi_home(self, context: ResolutionContext) -> str | None:
        kyuubi_home = context.env.get(KYUUBI_HOME)
        if not kyuubi_home:
            return None
        jar = context.absolute(kyuubi_home) / "externals" / "engines" / self.identity.family / self.identity.jar_name
        return str(jar.resolve()) if jar.exists() else None

    def _from_dev_checkout(self, context: ResolutionContext) -> str | None:
        relative = Path("externals", self.identity.module, "target", self.identity.jar_name)
        for base in (context.cwd, context.cwd.parent):
            jar = context.absolute(base / relative)
            if jar.exists():
                return str(jar.resolve())
        return None
