import click

from konfig.cli.utils import configure_logging, output_result
from konfig.identity import current_identity


@click.command(name="identity")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def show_identity(json_output: bool, debug: bool) -> None:
    """Show the deployment identity of this process."""
    configure_logging(debug)

    identity = current_identity()
    cluster = identity.cluster
    output_result(
        {
            "cluster": cluster.name,
            "namespace": identity.namespace.name,
            "application": identity.application.name,
            "client_id": identity.client_id.value,
            "image_name": identity.image_name,
            "is_prod": cluster.is_prod,
            "is_dev": cluster.is_dev,
            "is_vtp": cluster.is_vtp,
            "is_local": cluster.is_local,
            "is_fss": cluster.is_fss,
            "is_gcp": cluster.is_gcp,
        },
        json_output,
    )
