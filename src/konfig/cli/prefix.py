import click

from konfig.cli.utils import configure_logging, output_error, output_result
from konfig.environment import Environment
from konfig.errors import KonfigError


@click.command(name="prefix")
@click.argument("prefix")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def properties_with_prefix(prefix: str, json_output: bool, debug: bool) -> None:
    """List every property whose key starts with PREFIX.

    Keys set in several sources show the value that a lookup would return.

    \b
    Examples:
        konfig prefix app.
        konfig prefix kafka. --json-output
    """
    configure_logging(debug)

    try:
        output_result(Environment.current().get_properties_with_prefix(prefix), json_output)
    except KonfigError as e:
        output_error(e, json_output, debug)
