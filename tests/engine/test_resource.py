"""Unit tests for main resource (jar) resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from kyuubi_launcher.engine.flink import ENGINE_FLINK_MAIN_RESOURCE, flink_identity
from kyuubi_launcher.engine.models import EngineIdentity
from kyuubi_launcher.engine.resolution.resource import ResourceArtifactResolver

JAR_NAME = "kyuubi-flink-sql-engine_2.12-1.5.0-incubating.jar"


@pytest.fixture
def identity(settings) -> EngineIdentity:
    return flink_identity(settings)


@pytest.fixture
def resolver(identity: EngineIdentity) -> ResourceArtifactResolver:
    return ResourceArtifactResolver(identity, config_key=ENGINE_FLINK_MAIN_RESOURCE)


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


def test_jar_name(identity: EngineIdentity) -> None:
    assert identity.jar_name == JAR_NAME


def test_jar_name_is_verbatim_template() -> None:
    identity = EngineIdentity(
        module="m",
        main_class="M",
        version="1.0.0-SNAPSHOT",
        binary_file="m.sh",
        family="m",
        binary_compat_version="2.13",
    )
    assert identity.jar_name == "m_2.13-1.0.0-SNAPSHOT.jar"


# ---------------------------------------------------------------------------
# User specified
# ---------------------------------------------------------------------------


def test_user_specified_wins_over_kyuubi_home(resolver, make_context, tmp_path: Path) -> None:
    user_jar = _touch(tmp_path / "custom" / "engine.jar")
    kyuubi_home = tmp_path / "kyuubi"
    _touch(kyuubi_home / "externals" / "engines" / "flink" / JAR_NAME)

    ctx = make_context({"KYUUBI_HOME": str(kyuubi_home)}, main_resource=str(user_jar))

    assert resolver.resolve(ctx) == str(user_jar.resolve())


def test_user_specified_remote_uri_unchecked(resolver, make_context) -> None:
    ctx = make_context(main_resource="s3://bucket/key/engine.jar")

    assert resolver.resolve(ctx) == "s3://bucket/key/engine.jar"


def test_user_specified_hdfs_uri_unchecked(resolver, make_context) -> None:
    ctx = make_context(main_resource="hdfs://nn:8020/jars/engine.jar")

    assert resolver.resolve(ctx) == "hdfs://nn:8020/jars/engine.jar"


def test_user_specified_file_uri(resolver, make_context, tmp_path: Path) -> None:
    jar = _touch(tmp_path / "engine.jar")
    ctx = make_context(main_resource=jar.as_uri())

    assert resolver.resolve(ctx) == str(jar.resolve())


def test_user_specified_file_uri_percent_encoded(resolver, make_context, tmp_path: Path) -> None:
    jar = _touch(tmp_path / "my engine.jar")
    ctx = make_context(main_resource=jar.as_uri())

    assert "%20" in jar.as_uri()
    assert resolver.resolve(ctx) == str(jar.resolve())


def test_user_specified_relative_path_is_made_absolute(resolver, make_context, workspace: Path) -> None:
    jar = _touch(workspace / "lib" / "engine.jar")
    ctx = make_context(main_resource="lib/engine.jar")

    resolved = resolver.resolve(ctx)

    # The engine runs in its own working directory, so the path must not depend on ours.
    assert resolved == str(jar.resolve())
    assert Path(resolved).is_absolute()


def test_user_specified_missing_falls_through(resolver, make_context, tmp_path: Path) -> None:
    kyuubi_home = tmp_path / "kyuubi"
    expected = _touch(kyuubi_home / "externals" / "engines" / "flink" / JAR_NAME)
    ctx = make_context({"KYUUBI_HOME": str(kyuubi_home)}, main_resource=str(tmp_path / "missing.jar"))

    assert resolver.resolve(ctx) == str(expected.resolve())


# ---------------------------------------------------------------------------
# Build defaults
# ---------------------------------------------------------------------------


def test_kyuubi_home_wins_over_dev_checkout(resolver, make_context, tmp_path: Path, workspace: Path) -> None:
    kyuubi_home = tmp_path / "kyuubi"
    expected = _touch(kyuubi_home / "externals" / "engines" / "flink" / JAR_NAME)
    _touch(workspace / "externals" / "kyuubi-flink-sql-engine" / "target" / JAR_NAME)

    assert resolver.resolve(make_context({"KYUUBI_HOME": str(kyuubi_home)})) == str(expected.resolve())


def test_kyuubi_home_without_jar(resolver, make_context, tmp_path: Path) -> None:
    (tmp_path / "kyuubi").mkdir()

    assert resolver.resolve(make_context({"KYUUBI_HOME": str(tmp_path / "kyuubi")})) is None


def test_dev_checkout_cwd(resolver, make_context, workspace: Path) -> None:
    expected = _touch(workspace / "externals" / "kyuubi-flink-sql-engine" / "target" / JAR_NAME)

    assert resolver.resolve(make_context()) == str(expected.resolve())


def test_dev_checkout_parent(resolver, make_context, workspace: Path) -> None:
    expected = _touch(workspace.parent / "externals" / "kyuubi-flink-sql-engine" / "target" / JAR_NAME)

    assert resolver.resolve(make_context()) == str(expected.resolve())


def test_nothing_found(resolver, make_context) -> None:
    assert resolver.resolve(make_context()) is None
