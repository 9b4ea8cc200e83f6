"""Per-user working directory provisioning.

Layout when ``$KYUUBI_WORK_DIR_ROOT`` is usable::

    {root}/{proxy_user}/

If the per-user path is occupied by something other than a directory, a
fresh ``{root}/{proxy_user}-XXXXXXXX`` temp directory is used instead.  Without
a usable root, the temp directory is created in the system temp location.

Directories are never removed here; the spawned engine owns them.
"""

from __future__ import annotations

import tempfile
from functools import partial
from pathlib import Path

from loguru import logger

from kyuubi_launcher.engine.errors import ResourceProvisioningError
from kyuubi_launcher.engine.models import ResolutionContext
from kyuubi_launcher.engine.resolution.chain import first_resolved

KYUUBI_WORK_DIR_ROOT = "KYUUBI_WORK_DIR_ROOT"


class WorkingDirectoryProvisioner:
    def __init__(self, root_env_key: str = KYUUBI_WORK_DIR_ROOT) -> None:
        self.root_env_key = root_env_key

    def provision(self, context: ResolutionContext) -> Path:
        """Return an existing directory for ``context.proxy_user``.

        Raises ``ResourceProvisioningError`` on filesystem failures other than
        "already exists".
        """
        working = first_resolved(
            [
                (f"${self.root_env_key}", partial(self._under_root, context)),
                ("system temp", partial(create_temp_dir, context.proxy_user)),
            ]
        )
        # create_temp_dir either returns a path or raises
        assert working is not None
        return working

    def working_root(self, context: ResolutionContext) -> Path | None:
        """Absolute ``$KYUUBI_WORK_DIR_ROOT``, created if missing; ``None`` if unusable."""
        root = context.env.get(self.root_env_key)
        if not root:
            return None
        root_path = context.absolute(root)
        if not root_path.exists():
            logger.debug("Creating {} at {}", self.root_env_key, root_path)
        return root_path if ensure_directory(root_path) else None

    def _under_root(self, context: ResolutionContext) -> Path | None:
        root = self.working_root(context)
        if root is None:
            return None
        working = root / context.proxy_user
        if not working.exists():
            logger.debug("Creating {}'s working directory at {}", context.proxy_user, working)
        if ensure_directory(working):
            return working
        logger.warning("{} is not a directory, falling back to a temp directory under {}", working, root)
        return create_temp_dir(context.proxy_user, root)


def ensure_directory(path: Path) -> bool:
    """Create ``path`` with parents if missing; report whether it is now a directory.

    A directory created concurrently by someone else counts as success.  Any
    other ``OSError`` raises ``ResourceProvisioningError``.
    """
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except FileExistsError:
            # Occupied by a non-directory; reported by the is_dir check below.
            pass
        except OSError as e:
            raise ResourceProvisioningError(path, e) from e
    return path.is_dir()


def create_temp_dir(prefix: str, parent: Path | None = None) -> Path:
    """Create a uniquely named ``{prefix}-XXXXXXXX`` directory."""
    try:
        path = Path(tempfile.mkdtemp(prefix=f"{prefix}-", dir=parent))
    except OSError as e:
        raise ResourceProvisioningError(parent or tempfile.gettempdir(), e) from e
    logger.debug("Created temp working directory {}", path)
    return path
