"""Home directory resolution.

Resolution order:

1. ``$<ENV_KEY>`` from the context environment (trusted, not checked).
2. The launcher's install tree: the running code location is cut at the
   server marker segment, then ``<root>/<layout...>`` is inspected.
   With a ``prefix``, the first immediate subdirectory whose name starts with
   it is taken (``externals/kyuubi-download/target/flink-1.14.4``).
3. Otherwise ``ConfigurationError`` naming ``ENV_KEY``.  A code location
   outside any marker directory, or an unreadable layout directory, fails the
   same way.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import partial
from pathlib import Path

from kyuubi_launcher.engine.errors import DOCS_URL, ConfigurationError
from kyuubi_launcher.engine.models import ResolutionContext
from kyuubi_launcher.engine.resolution.chain import first_resolved

DEFAULT_SERVER_MARKER = "kyuubi_launcher"


def install_root(code_location: Path, marker: str = DEFAULT_SERVER_MARKER) -> Path:
    """Root of the install tree containing ``code_location``.

    Raises ``ConfigurationError`` if no path segment equals ``marker``.
    """
    parts = code_location.parts
    if marker not in parts:
        msg = f"Cannot locate the install tree: '{code_location}' is not inside a '{marker}' directory"
        raise ConfigurationError(msg)
    return Path(*parts[: parts.index(marker)])


class HomeDirectoryResolver:
    def __init__(
        self,
        env_key: str,
        layout: Sequence[str],
        *,
        engine_name: str,
        prefix: str | None = None,
        marker: str = DEFAULT_SERVER_MARKER,
        docs_url: str = DOCS_URL,
    ) -> None:
        self.env_key = env_key
        self.layout = tuple(layout)
        self.engine_name = engine_name
        self.prefix = prefix
        self.marker = marker
        self.docs_url = docs_url

    def resolve(self, context: ResolutionContext) -> str:
        home = first_resolved(
            [
                (f"${self.env_key}", partial(self._from_env, context)),
                ("install tree", partial(self._from_install_tree, context)),
            ]
        )
        if home is None:
            raise ConfigurationError.missing_env(self.env_key, self.engine_name, self.docs_url)
        return home

    def _from_env(self, context: ResolutionContext) -> str | None:
        return context.env.get(self.env_key) or None

    def _from_install_tree(self, context: ResolutionContext) -> str | None:
        try:
            base = install_root(context.code_location, self.marker).joinpath(*self.layout)
        except ConfigurationError as e:
            raise ConfigurationError.missing_env(self.env_key, self.engine_name, self.docs_url) from e
        if not base.is_dir():
            return None
        if self.prefix is None:
            return str(base.absolute())

        try:
            # Sorted so that several unpacked versions always yield the same pick.
            matches = sorted(p for p in base.iterdir() if p.is_dir() and p.name.startswith(self.prefix))
        except OSError as e:
            msg = (
                f"Cannot list {base} while looking for {self.engine_name} ({e}). "
                f"Set {self.env_key}, see {self.docs_url}"
            )
            raise ConfigurationError(msg, env_key=self.env_key, docs_url=self.docs_url) from e
        return str(matches[0].absolute()) if matches else None
