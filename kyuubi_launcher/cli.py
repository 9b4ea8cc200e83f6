import click


@click.group()
def main() -> None:
    """Kyuubi launcher - resolve how engine processes are started."""


@main.command()
@click.option("--proxy-user", required=True, help="User the engine is launched on behalf of.")
@click.option(
    "--conf",
    "-c",
    "conf_pairs",
    multiple=True,
    metavar="KEY=VALUE",
    help="Engine configuration, forwarded as -D arguments (repeatable).",
)
@click.option("--main-resource", default=None, help="Main jar path or URI (overrides the default lookup).")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the full launch spec as JSON.")
def flink(proxy_user: str, conf_pairs: tuple[str, ...], main_resource: str | None, as_json: bool) -> None:
    """Resolve the launch spec of a Flink SQL engine."""
    from kyuubi_launcher.engine.conf import EngineConf
    from kyuubi_launcher.engine.errors import LauncherError
    from kyuubi_launcher.engine.flink import ENGINE_FLINK_MAIN_RESOURCE, FLINK_ENV_KEYS, FlinkProcessBuilder
    from kyuubi_launcher.engine.log import setup_logging
    from kyuubi_launcher.engine.settings import get_settings

    settings = get_settings()
    setup_logging(settings.log_level, serialize=settings.log_json)

    try:
        conf = EngineConf.from_pairs(conf_pairs)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--conf") from e
    if main_resource:
        conf.set(ENGINE_FLINK_MAIN_RESOURCE, main_resource)

    builder = FlinkProcessBuilder(proxy_user, conf, settings=settings)
    try:
        spec = builder.build()
    except LauncherError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(spec.model_dump_json(indent=2))
        return

    click.echo(str(spec))
    click.echo(f"Working directory: {spec.working_dir}")
    for key in FLINK_ENV_KEYS.model_dump().values():
        click.echo(f"{key}={spec.env[key]}")


if __name__ == "__main__":
    main()
