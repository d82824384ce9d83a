import click

from konfig.cli.utils import configure_logging, output_error, output_result
from konfig.environment import Environment
from konfig.errors import KonfigError
from konfig.models import SourceKind


@click.command(name="sources")
@click.option(
    "--source",
    "source_name",
    type=click.Choice([kind.value for kind in SourceKind]),
    help="Only show entries from this source",
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def list_sources(source_name: str | None, json_output: bool, debug: bool) -> None:
    """Show the property sources in precedence order.

    With --source, print every entry held by that source.
    """
    configure_logging(debug)

    try:
        env = Environment.current()
        if source_name is not None:
            output_result(env.get_properties(SourceKind(source_name)).values, json_output)
            return

        results = [
            {"source": source.kind.value, "entries": len(source.all_entries())}
            for source in env.property_sources
        ]
        if json_output:
            output_result(results, json_output=True)
        else:
            for position, row in enumerate(results, start=1):
                click.echo(f"{position}. {row['source']} ({row['entries']} entries)")
    except KonfigError as e:
        output_error(e, json_output, debug)
