import click

from konfig.cli.utils import configure_logging, output_error, output_result
from konfig.converters import TypeTag, format_value, supported_tags
from konfig.environment import Environment
from konfig.errors import KonfigError


@click.command(name="get")
@click.argument("key")
@click.option(
    "--type",
    "type_name",
    type=click.Choice([tag.value for tag in supported_tags()]),
    default=TypeTag.STRING.value,
    show_default=True,
    help="Type to convert the value to",
)
@click.option("--default", "default", help="Value to print when the key is not set")
@click.option("--required", is_flag=True, help="Fail when the key is not set")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def get_property(
    key: str,
    type_name: str,
    default: str | None,
    required: bool,
    json_output: bool,
    debug: bool,
) -> None:
    """Resolve a single property.

    The value is looked up in system properties, then environment variables,
    then application properties, and converted to the requested type.

    \b
    Examples:
        konfig get app.timeout --type duration
        konfig get db.url --required
        konfig get feature.enabled --type boolean --default false
    """
    configure_logging(debug)

    try:
        env = Environment.current()
        tag = TypeTag(type_name)
        if required:
            value = env.get_required_property_as(key, tag)
        else:
            value = env.get_property(key, tag, default)
        output_result(None if value is None else format_value(value), json_output)
    except KonfigError as e:
        output_error(e, json_output, debug)
