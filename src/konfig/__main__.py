import click

from konfig.cli.get import get_property
from konfig.cli.identity import show_identity
from konfig.cli.prefix import properties_with_prefix
from konfig.cli.sources import list_sources
from konfig.version import PACKAGE_VERSION


@click.group(invoke_without_command=True)
@click.version_option(PACKAGE_VERSION, prog_name="konfig")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """konfig CLI"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(get_property)
cli.add_command(properties_with_prefix)
cli.add_command(list_sources)
cli.add_command(show_identity)


if __name__ == "__main__":
    cli()
