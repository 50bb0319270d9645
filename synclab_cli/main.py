"""synclab CLI entry point - assembles all command groups."""
import click

from . import __version__
from .offline_cmd import offline


@click.group()
@click.version_option(version=__version__)
def cli():
    """synclab: offline submission sync engine."""
    pass


cli.add_command(offline)


if __name__ == "__main__":
    cli()
